"""Preview of a publish queue, printed before anything is written."""

from __future__ import annotations

from collections.abc import Sequence

from rich.console import Console

from monodeps.planning import EXPLICIT, PublishRecord


def format_provenance(record: PublishRecord) -> str:
    """Describe why a package is in the queue, e.g. ``entry, pkg-a``."""
    labels = ["entry"] if record.is_entry else []
    labels.extend(sorted(p for p in record.provenance if p is not EXPLICIT))
    return ", ".join(labels)


def format_record(record: PublishRecord) -> str:
    """Render one record as text.

    Example::

        pkg-b: 1.0.0 => 1.1.0
          |- pkg-a: ^1.0.0 => ^1.1.0
        Added by: pkg-a
    """
    lines = [f"{record.name}: {record.previous_version} => {record.new_version}"]
    lines.extend(f"  |- {d.name}: {d.previous} => {d.new}" for d in record.dependencies)
    lines.append(f"Added by: {format_provenance(record)}")
    return "\n".join(lines)


def render_publish_plan(records: Sequence[PublishRecord]) -> str:
    """Render every record, separated by blank lines."""
    return "\n\n".join(format_record(r) for r in records)


def print_publish_plan(console: Console, records: Sequence[PublishRecord], *, title: str) -> None:
    """Print the queue preview.

    Args:
        console: Console to print to.
        records: Planned queue.
        title: Heading, e.g. ``Updates``.
    """
    if not records:
        return

    console.print(f"\n[bold]{title}:[/bold]")
    console.print(render_publish_plan(records), markup=False, highlight=False)
    console.print()
