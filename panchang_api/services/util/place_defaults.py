"""Helpers for normalising calendar place inputs."""

from typing import Any, Dict, Optional, Tuple

from timezonefinder import TimezoneFinder

from ... import config

_TF = TimezoneFinder()


def clamp_lat_lon(lat: float, lon: float) -> Tuple[float, float]:
    """Clamp latitude/longitude to safe ranges."""

    lat = max(min(lat, 89.9), -89.9)
    lon = ((lon + 180.0) % 360.0) - 180.0  # wrap to [-180, 180)
    return lat, lon


def infer_tz(lat: float, lon: float) -> Optional[str]:
    """Infer timezone name for a coordinate pair."""

    return _TF.timezone_at(lng=lon, lat=lat)


def normalize_place(
    lat: Optional[float], lon: Optional[float], tz: Optional[str]
) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """Fill in missing coordinates or timezone and report which defaults applied."""

    flags: Dict[str, Any] = {
        "place_defaults_used": False,
        "tz_inferred": False,
        "default_reason": None,
    }

    if lat is None or lon is None:
        flags.update({"place_defaults_used": True, "default_reason": "missing_latlon"})
        place = {
            "lat": config.default_place_lat(),
            "lon": config.default_place_lon(),
            "tz": tz or config.default_place_tz(),
            "label": config.default_place_label(),
        }
        return place, flags

    lat, lon = clamp_lat_lon(float(lat), float(lon))

    if not tz:
        flags["default_reason"] = "missing_tz"
        tz = infer_tz(lat, lon)
        if tz:
            flags["tz_inferred"] = True
        else:
            tz = config.default_place_tz()

    return {"lat": lat, "lon": lon, "tz": tz, "label": f"{lat:.4f}, {lon:.4f}"}, flags
