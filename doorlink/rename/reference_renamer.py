"""
Cascading propagation of a door id rename.

A rename of (document guid, old id) -> new id is applied to every link that
points at the old pair, across three persistence domains with different
durability:

- open documents: links rewritten, document marked dirty, never saved here;
- templates: links rewritten and the template saved immediately;
- on-disk documents (optional full sweep): opened transiently, rewritten,
  saved and released. Documents open in the authoring session are skipped,
  whatever their dirty state, because the open-document pass already
  handled them.

Nothing is rolled back. A cancelled sweep leaves already-processed documents
committed.
"""

from collections.abc import Callable
from dataclasses import dataclass, field

from tqdm import tqdm

from ..cancellation import CancellationToken
from ..exceptions import DoorLinkError
from ..models import EntityContainer
from ..persistence.accessor import DocumentAccessor
from ..persistence.templates import TemplateRepository
from ..structured_logging.enhanced_logging_config import get_logger, log_exception_once

logger = get_logger(__name__)

ProgressCallback = Callable[[int, int, str], None]


def replace_in_container(container: EntityContainer, target_guid: str, old_id: str, new_id: str) -> int:
    """
    Rewrite links pointing at (target_guid, old_id) so they point at new_id.

    Returns:
        Number of links changed
    """
    changed = 0
    for door in container.doors():
        if door.link.points_to(target_guid, old_id):
            door.link.target_door_id = new_id
            changed += 1
    return changed


@dataclass
class SweepReport:
    """Outcome of the on-disk document sweep."""

    documents_total: int = 0
    documents_processed: int = 0
    documents_saved: list[str] = field(default_factory=list)
    links_changed: int = 0
    skipped_open: list[str] = field(default_factory=list)
    failed: list[tuple[str, str]] = field(default_factory=list)
    cancelled: bool = False


@dataclass
class RenameReport:
    """Outcome of a rename across every domain."""

    target_document_guid: str
    old_id: str
    new_id: str
    open_links_changed: int = 0
    open_documents_changed: list[str] = field(default_factory=list)
    template_links_changed: int = 0
    templates_saved: list[str] = field(default_factory=list)
    templates_failed: list[tuple[str, str]] = field(default_factory=list)
    disk: SweepReport | None = None
    committed: bool = False

    @property
    def cancelled(self) -> bool:
        return self.disk is not None and self.disk.cancelled

    @property
    def total_links_changed(self) -> int:
        disk_links = self.disk.links_changed if self.disk else 0
        return self.open_links_changed + self.template_links_changed + disk_links

    def summary(self) -> str:
        """Operator-facing multi-line summary."""
        lines = [
            f"Door ID changed: {self.old_id} -> {self.new_id}"
            if self.committed
            else f"Door ID NOT changed: {self.old_id} -> {self.new_id}",
            "Updated references:",
            f"- Open documents: {self.open_links_changed} (documents marked dirty)",
            f"- Templates: {self.template_links_changed} (templates saved)",
        ]
        if self.disk is not None:
            lines.append(
                f"- On-disk documents: {self.disk.links_changed} in {len(self.disk.documents_saved)} documents (saved)"
            )
            if self.disk.skipped_open:
                lines.append(f"- Skipped (open): {len(self.disk.skipped_open)}")
            if self.disk.failed:
                lines.append(f"- Failed to open: {len(self.disk.failed)}")
            if self.disk.cancelled:
                lines.append(
                    f"- Sweep cancelled after {self.disk.documents_processed}/{self.disk.documents_total} documents"
                )
        return "\n".join(lines)


class ReferenceRenamer:
    """Applies one explicit rename to links in open documents, templates and on-disk documents."""

    def __init__(self, accessor: DocumentAccessor, templates: TemplateRepository):
        """
        Initialize the renamer.

        Args:
            accessor: Document accessor for open and on-disk documents
            templates: Template repository
        """
        self.accessor = accessor
        self.templates = templates

    def replace_in_open_documents(self, target_guid: str, old_id: str, new_id: str) -> tuple[int, list[str]]:
        """
        Update links in currently open documents. Modified documents are marked dirty, not saved.

        Returns:
            (links changed, guids of documents changed)
        """
        links = 0
        changed_guids: list[str] = []
        for document in self.accessor.open_documents():
            changed = replace_in_container(document, target_guid, old_id, new_id)
            if changed:
                links += changed
                changed_guids.append(document.guid)
                self.accessor.mark_dirty(document)
        logger.info("Open documents updated", links_changed=links, documents=len(changed_guids))
        return links, changed_guids

    def replace_in_templates(
        self, target_guid: str, old_id: str, new_id: str
    ) -> tuple[int, list[str], list[tuple[str, str]]]:
        """
        Update links in every template. Modified templates are saved immediately.

        Returns:
            (links changed, paths of templates saved, (path, error) of templates that failed)
        """
        links = 0
        saved: list[str] = []
        failed: list[tuple[str, str]] = []
        for path in self.templates.template_paths():
            try:
                with self.templates.editing(path) as template:
                    changed = replace_in_container(template, target_guid, old_id, new_id)
                    if changed:
                        self.templates.save(template)
                        links += changed
                        saved.append(str(path))
            except (DoorLinkError, OSError) as e:
                log_exception_once(logger, "warning", "Template skipped during rename", exc=e, path=str(path))
                failed.append((str(path), str(e)))
        logger.info("Templates updated", links_changed=links, templates=len(saved))
        return links, saved, failed

    def replace_in_closed_documents(
        self,
        target_guid: str,
        old_id: str,
        new_id: str,
        *,
        cancel_token: CancellationToken | None = None,
        progress: ProgressCallback | None = None,
        show_progress: bool = False,
    ) -> SweepReport:
        """
        Sweep documents that are not open: open transiently, rewrite, save, release.

        A document that cannot be opened or saved is recorded and skipped;
        the sweep continues. The cancel token is checked between documents.

        Args:
            target_guid: Guid of the document owning the renamed door
            old_id: Previous door id
            new_id: New door id
            cancel_token: Operator cancellation, checked between documents
            progress: Called with (index, total, guid) before each document
            show_progress: Whether to show a progress bar

        Returns:
            SweepReport with partial results if cancelled
        """
        self.accessor.store.refresh()
        guids = self.accessor.store.document_guids()
        report = SweepReport(documents_total=len(guids))
        # Files that could not be indexed never reach the loop below.
        report.failed.extend(self.accessor.store.parsing_errors)

        with tqdm(guids, desc="Updating documents", disable=not show_progress) as documents_to_process:
            for index, guid in enumerate(documents_to_process):
                if cancel_token is not None and cancel_token.cancelled:
                    report.cancelled = True
                    logger.warning(
                        "Reference sweep cancelled",
                        processed=report.documents_processed,
                        total=report.documents_total,
                    )
                    break

                if progress is not None:
                    progress(index, report.documents_total, guid)

                if self.accessor.is_open(guid):
                    report.skipped_open.append(guid)
                    report.documents_processed += 1
                    continue

                try:
                    with self.accessor.using_document(guid) as document:
                        changed = replace_in_container(document, target_guid, old_id, new_id)
                        if changed:
                            self.accessor.save(document)
                            report.links_changed += changed
                            report.documents_saved.append(guid)
                except (DoorLinkError, OSError) as e:
                    log_exception_once(
                        logger, "warning", "Document skipped during rename", exc=e, document_guid=guid
                    )
                    report.failed.append((guid, str(e)))
                report.documents_processed += 1

        logger.info(
            "On-disk documents updated",
            links_changed=report.links_changed,
            documents_saved=len(report.documents_saved),
            skipped_open=len(report.skipped_open),
            failed=len(report.failed),
            cancelled=report.cancelled,
        )
        return report

    def propagate(
        self,
        target_guid: str,
        old_id: str,
        new_id: str,
        *,
        full_sweep: bool = True,
        cancel_token: CancellationToken | None = None,
        progress: ProgressCallback | None = None,
        show_progress: bool = False,
    ) -> RenameReport:
        """Run every domain in order: open documents, templates, then the optional on-disk sweep."""
        report = RenameReport(target_document_guid=target_guid, old_id=old_id, new_id=new_id)

        report.open_links_changed, report.open_documents_changed = self.replace_in_open_documents(
            target_guid, old_id, new_id
        )
        (
            report.template_links_changed,
            report.templates_saved,
            report.templates_failed,
        ) = self.replace_in_templates(target_guid, old_id, new_id)

        if full_sweep:
            report.disk = self.replace_in_closed_documents(
                target_guid,
                old_id,
                new_id,
                cancel_token=cancel_token,
                progress=progress,
                show_progress=show_progress,
            )
        return report
