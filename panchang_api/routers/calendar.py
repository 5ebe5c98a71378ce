"""Calendar API endpoints."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from ..errors import InvalidInputError, UpstreamUnavailableError
from ..schemas.calendar import MonthView, PanchangElementsVM, RegionalCalendar, YearView
from ..services.calendar_facade import PanchangCalendar
from ..services.panchang_elements import compute_elements, karana_table
from ..services.util.place_defaults import normalize_place
from .. import config


logger = logging.getLogger(__name__)
router = APIRouter(prefix="/v1/calendar", tags=["calendar"])


def get_calendar(request: Request) -> PanchangCalendar:
    return request.app.state.calendar


def _upstream_failure(exc: UpstreamUnavailableError) -> HTTPException:
    logger.error("UPSTREAM_UNAVAILABLE: %s", exc, extra=exc.as_detail())
    return HTTPException(status_code=502, detail=exc.as_detail())


@router.get(
    "/month",
    response_model=MonthView,
    summary="Get Panchang names for every day of a month",
    description="Defaults to the current month at the configured default place.",
)
async def calendar_month(
    year: Optional[int] = Query(None, ge=1, le=9999, description="Year (YYYY). Defaults to the current year"),
    month: Optional[int] = Query(None, ge=1, le=12, description="Month (1-12). Defaults to the current month"),
    region: RegionalCalendar = Query(RegionalCalendar.UNIVERSAL, description="Regional calendar"),
    lat: Optional[float] = Query(None, ge=-90.0, le=90.0, description="Latitude"),
    lon: Optional[float] = Query(None, ge=-180.0, le=180.0, description="Longitude"),
    tz: Optional[str] = Query(None, description="IANA timezone"),
    calendar: PanchangCalendar = Depends(get_calendar),
):
    now = calendar.clock()
    place, flags = normalize_place(lat, lon, tz)
    if flags["default_reason"]:
        logger.info(
            "calendar.place.defaults",
            extra={"reason": flags["default_reason"], "lat": place["lat"], "lon": place["lon"], "tz": place["tz"]},
        )
    try:
        return await calendar.get_month_panchang(
            year if year is not None else now.year,
            month if month is not None else now.month,
            region,
            place["lat"],
            place["lon"],
            place["tz"],
        )
    except InvalidInputError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except UpstreamUnavailableError as exc:
        raise _upstream_failure(exc) from exc


@router.get(
    "/year",
    response_model=YearView,
    summary="Get festival names grouped by month for a year",
)
async def calendar_year(
    year: Optional[int] = Query(None, ge=1, le=9999, description="Year (YYYY). Defaults to the current year"),
    region: RegionalCalendar = Query(RegionalCalendar.UNIVERSAL, description="Regional calendar"),
    lat: Optional[float] = Query(None, ge=-90.0, le=90.0, description="Latitude"),
    lon: Optional[float] = Query(None, ge=-180.0, le=180.0, description="Longitude"),
    calendar: PanchangCalendar = Depends(get_calendar),
):
    place, _flags = normalize_place(lat, lon, None)
    try:
        return await calendar.get_year_festival_names(
            year if year is not None else calendar.clock().year,
            region,
            place["lat"],
            place["lon"],
        )
    except InvalidInputError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except UpstreamUnavailableError as exc:
        raise _upstream_failure(exc) from exc


@router.get(
    "/elements",
    response_model=PanchangElementsVM,
    summary="Derive tithi, paksha, yoga and karana from Sun and Moon longitudes",
)
def calendar_elements(
    sun: float = Query(..., description="Sun ecliptic longitude in degrees"),
    moon: float = Query(..., description="Moon ecliptic longitude in degrees"),
):
    try:
        elements = compute_elements(sun, moon, karana_table(config.karana_table_name()))
    except InvalidInputError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return PanchangElementsVM(
        sun_longitude=sun,
        moon_longitude=moon,
        tithi=elements.tithi,
        paksha=elements.paksha,
        yoga=elements.yoga,
        karana=elements.karana,
    )
