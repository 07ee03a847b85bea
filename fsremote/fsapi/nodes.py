#!/usr/bin/env python3
"""
Node schema

Static table between the symbolic nodes this client knows about and the
dotted paths used on the wire.  Adding a node is an edit to this table.
Paths are lower case, which is how the devices report them in
notifications; lookups from the wire ignore case.
"""

import enum

from .types import UnknownNode


class Node(enum.Enum):
    """device capability, valued by its wire path"""

    # nav
    NAV_LIST = "netremote.nav.list"
    NAV_NUM_ITEMS = "netremote.nav.numitems"
    NAV_PRESETS = "netremote.nav.presets"
    NAV_SEARCH_TERM = "netremote.nav.searchterm"
    NAV_STATE = "netremote.nav.state"
    NAV_STATUS = "netremote.nav.status"
    NAV_DEPTH = "netremote.nav.depth"

    # nav.action
    NAV_ACTION_DAB_SCAN = "netremote.nav.action.dabscan"
    NAV_ACTION_NAVIGATE = "netremote.nav.action.navigate"
    NAV_ACTION_SELECT_ITEM = "netremote.nav.action.selectitem"
    NAV_ACTION_SELECT_PRESET = "netremote.nav.action.selectpreset"

    # play
    PLAY_ADD_PRESET = "netremote.play.addpreset"
    PLAY_CAPS = "netremote.play.caps"
    PLAY_CONTROL = "netremote.play.control"
    PLAY_ERROR_STR = "netremote.play.errorstr"
    PLAY_FREQUENCY = "netremote.play.frequency"
    PLAY_POSITION = "netremote.play.position"
    PLAY_RATE = "netremote.play.rate"
    PLAY_REPEAT = "netremote.play.repeat"
    PLAY_SCROBBLE = "netremote.play.scrobble"
    PLAY_SHUFFLE = "netremote.play.shuffle"
    PLAY_SHUFFLE_STATUS = "netremote.play.shufflestatus"
    PLAY_SIGNAL_STRENGTH = "netremote.play.signalstrength"
    PLAY_STATUS = "netremote.play.status"

    # play.info
    PLAY_INFO_ALBUM = "netremote.play.info.album"
    PLAY_INFO_ARTIST = "netremote.play.info.artist"
    PLAY_INFO_DURATION = "netremote.play.info.duration"
    PLAY_INFO_GRAPHIC_URI = "netremote.play.info.graphicuri"
    PLAY_INFO_NAME = "netremote.play.info.name"
    PLAY_INFO_TEXT = "netremote.play.info.text"

    # play.serviceIds
    PLAY_SERVICE_IDS_DAB_ENSEMBLE_ID = "netremote.play.serviceids.dabensembleid"
    PLAY_SERVICE_IDS_DAB_SCIDS = "netremote.play.serviceids.dabscids"
    PLAY_SERVICE_IDS_DAB_SERVICE_ID = "netremote.play.serviceids.dabserviceid"
    PLAY_SERVICE_IDS_ECC = "netremote.play.serviceids.ecc"
    PLAY_SERVICE_IDS_FM_RDS_PI = "netremote.play.serviceids.fmrdspi"

    # sys
    SYS_LANG = "netremote.sys.lang"
    SYS_MODE = "netremote.sys.mode"
    SYS_POWER = "netremote.sys.power"
    SYS_SLEEP = "netremote.sys.sleep"
    SYS_STATE = "netremote.sys.state"

    # sys.audio
    SYS_AUDIO_EQ_CUSTOM_PARAM0 = "netremote.sys.audio.eqcustom.param0"
    SYS_AUDIO_EQ_CUSTOM_PARAM1 = "netremote.sys.audio.eqcustom.param1"
    SYS_AUDIO_EQ_LOUDNESS = "netremote.sys.audio.eqloudness"
    SYS_AUDIO_EQ_PRESET = "netremote.sys.audio.eqpreset"
    SYS_AUDIO_MUTE = "netremote.sys.audio.mute"
    SYS_AUDIO_VOLUME = "netremote.sys.audio.volume"

    # sys.caps
    SYS_CAPS_CLOCK_SOURCE_LIST = "netremote.sys.caps.clocksourcelist"
    SYS_CAPS_DAB_FREQ_LIST = "netremote.sys.caps.dabfreqlist"
    SYS_CAPS_EQ_BANDS = "netremote.sys.caps.eqbands"
    SYS_CAPS_EQ_PRESETS = "netremote.sys.caps.eqpresets"
    SYS_CAPS_FM_FREQ_RANGE_LOWER = "netremote.sys.caps.fmfreqrange.lower"
    SYS_CAPS_FM_FREQ_RANGE_STEP_SIZE = "netremote.sys.caps.fmfreqrange.stepsize"
    SYS_CAPS_FM_FREQ_RANGE_UPPER = "netremote.sys.caps.fmfreqrange.upper"
    SYS_CAPS_VALID_MODES = "netremote.sys.caps.validmodes"
    SYS_CAPS_VOLUME_STEPS = "netremote.sys.caps.volumesteps"

    # sys.clock
    SYS_CLOCK_DST = "netremote.sys.clock.dst"
    SYS_CLOCK_LOCAL_DATE = "netremote.sys.clock.localdate"
    SYS_CLOCK_LOCAL_TIME = "netremote.sys.clock.localtime"
    SYS_CLOCK_MODE = "netremote.sys.clock.mode"
    SYS_CLOCK_SOURCE = "netremote.sys.clock.source"
    SYS_CLOCK_UTC_OFFSET = "netremote.sys.clock.utcoffset"

    # sys.cfg
    SYS_CFG_IR_AUTO_PLAY_FLAG = "netremote.sys.cfg.irautoplayflag"

    # sys.info
    SYS_INFO_FRIENDLY_NAME = "netremote.sys.info.friendlyname"
    SYS_INFO_RADIO_ID = "netremote.sys.info.radioid"
    SYS_INFO_RADIO_PIN = "netremote.sys.info.radiopin"
    SYS_INFO_VERSION = "netremote.sys.info.version"
    SYS_INFO_CONTROLLER_NAME = "netremote.sys.info.controllername"

    # sys.isu
    SYS_ISU_CONTROL = "netremote.sys.isu.control"
    SYS_ISU_STATE = "netremote.sys.isu.state"

    # sys.net
    SYS_NET_IP_CONFIG_ADDRESS = "netremote.sys.net.ipconfig.address"
    SYS_NET_IP_CONFIG_DHCP = "netremote.sys.net.ipconfig.dhcp"
    SYS_NET_IP_CONFIG_DNS_PRIMARY = "netremote.sys.net.ipconfig.dnsprimary"
    SYS_NET_IP_CONFIG_DNS_SECONDARY = "netremote.sys.net.ipconfig.dnssecondary"
    SYS_NET_IP_CONFIG_GATEWAY = "netremote.sys.net.ipconfig.gateway"
    SYS_NET_IP_CONFIG_SUBNET_MASK = "netremote.sys.net.ipconfig.subnetmask"
    SYS_NET_KEEP_CONNECTED = "netremote.sys.net.keepconnected"
    SYS_NET_WIRED_INTERFACE_ENABLE = "netremote.sys.net.wired.interfaceenable"
    SYS_NET_WIRED_MAC_ADDRESS = "netremote.sys.net.wired.macaddress"
    SYS_NET_WLAN_CONNECTED_SSID = "netremote.sys.net.wlan.connectedssid"
    SYS_NET_WLAN_INTERFACE_ENABLE = "netremote.sys.net.wlan.interfaceenable"
    SYS_NET_WLAN_MAC_ADDRESS = "netremote.sys.net.wlan.macaddress"
    SYS_NET_WLAN_RSSI = "netremote.sys.net.wlan.rssi"
    SYS_NET_WLAN_SET_AUTH_TYPE = "netremote.sys.net.wlan.setauthtype"
    SYS_NET_WLAN_SET_ENC_TYPE = "netremote.sys.net.wlan.setenctype"

    # sys.rsa
    SYS_RSA_PUBLIC_KEY = "netremote.sys.rsa.publickey"
    SYS_RSA_STATUS = "netremote.sys.rsa.status"

    def __str__(self) -> str:
        return self.value


_BY_PATH: dict[str, Node] = {node.value: node for node in Node}


def resolve(node: Node) -> str:
    """node -> wire path"""
    return node.value


def parse(path: str) -> Node:
    """wire path -> node, UnknownNode if the schema does not have it"""
    try:
        return _BY_PATH[path.strip().lower()]
    except (KeyError, AttributeError) as err:
        raise UnknownNode(str(path)) from err


def lookup(name: str) -> Node:
    """accept either a member name (SYS_AUDIO_VOLUME) or a wire path"""
    with_underscores = name.strip().upper().replace("-", "_")
    if with_underscores in Node.__members__:
        return Node[with_underscores]
    return parse(name)
