from .report import generate_step_summary, summary_to_dict, write_reports

__all__ = ["generate_step_summary", "summary_to_dict", "write_reports"]
