from .periods import PeriodResolver, ReportSelection, whole_days, available_years, available_months
from .aggregator import ReportAggregator
from .export import trips_frame, report_csv, report_details, trip_details
