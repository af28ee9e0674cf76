"""iOS Info.plist entries required by the mediation SDK."""

import copy
import logging
import plistlib
from pathlib import Path
from typing import Any, Union

logger = logging.getLogger(__name__)

TRACKING_USAGE_DESCRIPTION = "This identifier will be used to deliver personalized ads to you."

# SKAdNetwork identifiers of the Unity Ads / IronSource demand partners
SKADNETWORK_IDENTIFIERS = (
    "su67r6k2v3.skadnetwork",
    "4fzdc2evr5.skadnetwork",
    "4pfyvq9l8r.skadnetwork",
    "v72qych5uu.skadnetwork",
    "ludvb6z3bs.skadnetwork",
    "cp8zw746q7.skadnetwork",
    "c6k4g5qg8m.skadnetwork",
    "3sh42y64q3.skadnetwork",
    "3rd42ekr43.skadnetwork",
    "424m5254lk.skadnetwork",
    "578prtvx9j.skadnetwork",
    "5lm9lj6jb7.skadnetwork",
    "p78axxw29g.skadnetwork",
    "v4nxqhlyqp.skadnetwork",
    "wzmmz9fp6w.skadnetwork",
    "yclnxrl5pm.skadnetwork",
    "t38b2kh725.skadnetwork",
    "7ug5zh24hu.skadnetwork",
    "9rd848q2bz.skadnetwork",
    "n6fk4nfna4.skadnetwork",
    "kbd757ywx3.skadnetwork",
    "9t245vhmpl.skadnetwork",
    "av6w8kgt66.skadnetwork",
    "klf5c3l5u5.skadnetwork",
    "ppxm28t8ap.skadnetwork",
    "uw77j35x4d.skadnetwork",
    "pwa73g5rt2.skadnetwork",
    "mlmmfzh3r3.skadnetwork",
    "5l3tpt7t6e.skadnetwork",
    "hs6bdukanm.skadnetwork",
    "cstr6suwn9.skadnetwork",
    "4468km3ulz.skadnetwork",
    "2u9pt9hc89.skadnetwork",
    "8s468mfl3y.skadnetwork",
    "74b6s63p6l.skadnetwork",
    "prcb7njmu6.skadnetwork",
    "e5fvkxwrpn.skadnetwork",
    "f38h382jlk.skadnetwork",
    "7rz58n8ntl.skadnetwork",
    "rx5hdcabgc.skadnetwork",
    "g28c52eehv.skadnetwork",
    "cg4yq2srnc.skadnetwork",
    "gta9lk7p23.skadnetwork",
    "252b5q8x7y.skadnetwork",
    "294l99pt4k.skadnetwork",
    "feyaarzu9v.skadnetwork",
    "ggvn48r87g.skadnetwork",
    "glqzh8vgby.skadnetwork",
    "v9wttpbfk9.skadnetwork",
    "n38lu8286q.skadnetwork",
    "47vhws6wlr.skadnetwork",
    "zmvfpc5aq8.skadnetwork",
    "ejvt5qm6ak.skadnetwork",
    "5tjdwbrq8w.skadnetwork",
    "mtkv5xtk9e.skadnetwork",
    "6g9af3uyq4.skadnetwork",
    "rvh3l7un93.skadnetwork",
    "y45688jllp.skadnetwork",
    "9nlb52qjxg.skadnetwork",
    "gvmwg8q7h5.skadnetwork",
)


def patch_info_plist(plist: dict[str, Any]) -> dict[str, Any]:
    """Add ad network ids, the ATS exception and the tracking description in place."""
    items = plist.setdefault("SKAdNetworkItems", [])
    present = {item.get("SKAdNetworkIdentifier") for item in items if isinstance(item, dict)}
    added = 0
    for identifier in SKADNETWORK_IDENTIFIERS:
        if identifier not in present:
            items.append({"SKAdNetworkIdentifier": identifier})
            present.add(identifier)
            added += 1

    plist.setdefault("NSAppTransportSecurity", {})["NSAllowsArbitraryLoads"] = True
    plist.setdefault("NSUserTrackingUsageDescription", TRACKING_USAGE_DESCRIPTION)

    logger.debug("Added %d SKAdNetwork identifiers", added)
    return plist


def patch_info_plist_file(path: Union[str, Path]) -> bool:
    """Patch an Info.plist on disk, keeping its format. Returns True if it changed."""
    path = Path(path)
    raw = path.read_bytes()
    fmt = plistlib.FMT_BINARY if raw.startswith(b"bplist") else plistlib.FMT_XML

    original = plistlib.loads(raw)
    plist = patch_info_plist(copy.deepcopy(original))
    if plist == original:
        return False

    with path.open("wb") as fp:
        plistlib.dump(plist, fp, fmt=fmt)
    return True
