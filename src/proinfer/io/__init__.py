from .export import get_writer, peptides_to_frame, proteins_to_frame, write_frame
from .groups import (
    InferenceInput,
    build_group_graph,
    build_report_psm_sets,
    load_inference_input,
)

__all__ = [
    "InferenceInput",
    "build_group_graph",
    "build_report_psm_sets",
    "get_writer",
    "load_inference_input",
    "peptides_to_frame",
    "proteins_to_frame",
    "write_frame",
]
