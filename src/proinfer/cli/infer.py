"""``proinfer infer``: run the protein inference on a stored registry."""

from pathlib import Path

from rich.console import Console
from rich.table import Table

from proinfer.config import load_settings
from proinfer.db.connect import get_session
from proinfer.db.store import load_registry
from proinfer.inference import PrecomputedSetInference
from proinfer.io import load_inference_input, peptides_to_frame, proteins_to_frame, write_frame
from proinfer.logging import get_logger

logger = get_logger(__file__)


def register_arguments(parser):
    parser.add_argument(
        "--groups",
        required=True,
        help="JSON file with groups, same-sets, subsets and PSM evidence",
    )
    parser.add_argument("--settings", help="Inference settings JSON (default: $PROINFER_CONFIG)")
    parser.add_argument("--database", help="Database path or URI (default: $PROINFER_DB_PATH)")
    parser.add_argument("--out", help="Write the protein table to this .tsv/.csv/.json file")
    parser.add_argument("--peptides-out", help="Write the reported peptides to this file")
    parser.add_argument(
        "--filter",
        dest="filters",
        action="append",
        default=[],
        metavar="EXPR",
        help="Additional filter definition; may be repeated",
    )
    parser.add_argument("--threads", type=int, help="Override the allowed number of threads")


def dispatch(args, console: Console | None = None):
    settings = load_settings(args.settings)
    if args.filters:
        settings = settings.model_copy(update={"filters": [*settings.filters, *args.filters]})
    if args.threads is not None:
        settings = settings.model_copy(update={"allowed_threads": args.threads})

    parsed = settings.build_filters()
    inference = PrecomputedSetInference(
        filters=parsed.filters,
        scoring=settings.scoring.build(),
        allowed_threads=settings.allowed_threads,
    )

    with get_session(args.database) as session:
        registry = load_registry(session)

    data = load_inference_input(args.groups, registry, settings.key_settings)
    proteins = inference.calculate_inference(
        data.group_graph,
        data.report_psm_sets,
        consider_modifications=settings.consider_modifications,
        key_settings=settings.key_settings,
        same_sets=data.same_sets,
        sub_groups=data.sub_groups,
        registry=registry,
    )

    if args.out:
        write_frame(proteins_to_frame(proteins), args.out)
    else:
        _render_proteins(proteins, console or Console())

    if args.peptides_out:
        peptides = {}
        for protein in proteins:
            for peptide in protein.peptides:
                peptides.setdefault(peptide.string_id, peptide)
        write_frame(
            peptides_to_frame(peptides.values(), settings.scoring.score_short),
            Path(args.peptides_out),
        )

    return 0


def _render_proteins(proteins, console: Console) -> None:
    table = Table(title=f"Report proteins ({len(proteins)})")
    table.add_column("ID", justify="right")
    table.add_column("Accessions", style="bold cyan")
    table.add_column("Score", justify="right", style="green")
    table.add_column("#Peptides", justify="right")
    table.add_column("#PSMs", justify="right")
    table.add_column("Subsets", style="bright_black")
    for protein in proteins:
        table.add_row(
            str(protein.id),
            ", ".join(protein.accession_names),
            f"{protein.score:.4g}",
            str(protein.nr_peptides),
            str(protein.nr_psms),
            ", ".join(str(sub.id) for sub in protein.subsets),
        )
    console.print(table)
