"""Tabular and plain-text views of reports and trips for export surfaces (CSV attachments, share sheets)."""
from typing import Sequence

import pandas as pd

from kmtracker.core.trip import Report, Trip, format_date, format_duration

CSV_COLUMNS = ["Date", "Driving Time", "Total KMs"]


def trips_frame(trips: Sequence[Trip]) -> pd.DataFrame:
    """One row per trip in the given order: formatted date, HH:MM:SS driving time, raw km."""
    rows = [
        {
            "Date": format_date(t.date),
            "Driving Time": format_duration(t.driving_time_seconds),
            "Total KMs": float(t.total_distance_km),
        }
        for t in trips
    ]
    return pd.DataFrame(rows, columns=CSV_COLUMNS)


def report_csv(report: Report, trips: Sequence[Trip]) -> str:
    """
    CSV with one line per contributing trip.
    `trips` should come from ReportAggregator.trips_for(report, ...); trips outside
    the report range are left out.
    """
    in_range = [t for t in trips if report.period.contains(t.date)]
    return trips_frame(in_range).to_csv(index=False, lineterminator="\n")


def report_details(report: Report) -> str:
    return (
        f"Report: {report.title}\n"
        f"Total Driving Time: {format_duration(report.total_driving_time_seconds)}\n"
        f"Total KMs: {report.total_distance_km:.2f} KM\n"
    )


def trip_details(trip: Trip) -> str:
    return (
        "Trip Details:\n"
        f"Date: {trip.date:%B} {trip.date.day}, {trip.date.year}\n"
        f"Driving Time: {format_duration(trip.driving_time_seconds)}\n"
        f"Total Kilometers: {trip.total_distance_km:.2f} KM"
    )
