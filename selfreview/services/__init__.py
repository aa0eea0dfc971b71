"""Service layer exports."""

from .aggregation import aggregate, has_data_to_generate, process_tracker_data
from .daily_record_repository import DailyRecordRepository
from .daily_records import DailyRecordStore
from .report_export import report_filename, write_report
from .report_generator import ReportGenerator
from .report_graph import create_report_graph, run_report_graph
from .report_synthesis import synthesize
from .spreadsheet_import import SpreadsheetImporter
from .state_store import Action, ActionType, StateStore, reduce
from .workflow import OperationResult, ReportSession

__all__ = [
    "Action",
    "ActionType",
    "DailyRecordRepository",
    "DailyRecordStore",
    "OperationResult",
    "ReportGenerator",
    "ReportSession",
    "SpreadsheetImporter",
    "StateStore",
    "aggregate",
    "create_report_graph",
    "has_data_to_generate",
    "process_tracker_data",
    "reduce",
    "report_filename",
    "run_report_graph",
    "synthesize",
    "write_report",
]
