from .dates import normalize_date_range, parse_date, strip_alphanumeric, weekday_label
from .numbers import round_half_up

__all__ = ["normalize_date_range", "parse_date", "round_half_up", "strip_alphanumeric", "weekday_label"]
