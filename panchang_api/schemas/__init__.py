from .calendar import DayRecord, MonthView, PanchangElementsVM, RegionalCalendar, YearView
from .ephemeris import FestivalRule, LongitudeReading, RiseSetTimes
