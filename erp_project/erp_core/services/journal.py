import logging

from django.db.models import Prefetch

from ..db import atomic_scope
from ..models import JournalEntry, JournalEntryLine

logger = logging.getLogger(__name__)


# ----------------------------
# Journal-entry write path
# ----------------------------
def _insert_lines(entry: JournalEntry, lines):
    # Link each line to its parent and the parent's tenant, in input order
    for line in lines:
        line.pk = None
        line.journal_entry = entry
        line.tenant_id = entry.tenant_id
        line.save(force_insert=True)
    # drop any prefetched lines so entry.lines reads the new set
    if hasattr(entry, "_prefetched_objects_cache"):
        entry._prefetched_objects_cache.pop("lines", None)


def create_journal_entry(entry: JournalEntry, lines) -> JournalEntry:
    """
    Persist a header and its lines as one unit.

    Input is trusted (the HTTP layer checks entry_date and line count).
    `entry` and every object in `lines` get their ids and timestamps
    assigned in place. If any insert fails, nothing is kept and the
    storage error propagates unchanged.
    """
    lines = list(lines)
    with atomic_scope():
        entry.save(force_insert=True)
        _insert_lines(entry, lines)
    logger.info(
        "journal entry %s created for tenant %s with %d lines",
        entry.pk, entry.tenant_id, len(lines),
    )
    return entry


def update_journal_entry(entry: JournalEntry, lines) -> JournalEntry:
    """
    Replace an entry's header fields and its whole line set.

    Old lines are deleted and `lines` inserted with fresh ids: an update
    with fewer lines leaves strictly fewer lines stored. On failure the
    previous header and lines stay intact.
    """
    lines = list(lines)
    with atomic_scope():
        # raises DatabaseError when the row vanished meanwhile
        entry.save(update_fields=[
            "entry_date", "reference", "description", "updated_at"])
        JournalEntryLine.objects.filter(
            tenant_id=entry.tenant_id, journal_entry_id=entry.pk
        ).delete()
        _insert_lines(entry, lines)
    logger.info(
        "journal entry %s updated for tenant %s, lines replaced with %d",
        entry.pk, entry.tenant_id, len(lines),
    )
    return entry


def delete_journal_entry(tenant, entry_id) -> int:
    """Delete lines then header; returns the number of headers removed."""
    with atomic_scope():
        JournalEntryLine.objects.filter(
            tenant=tenant, journal_entry_id=entry_id).delete()
        deleted, _ = JournalEntry.objects.filter(
            tenant=tenant, pk=entry_id).delete()
    logger.info("journal entry %s deleted (%d rows)", entry_id, deleted)
    return deleted


# ----------------------------
# Reads
# ----------------------------
def _with_lines(queryset):
    # lines fetched in insertion order alongside their entries
    return queryset.prefetch_related(
        Prefetch("lines", queryset=JournalEntryLine.objects.order_by("id"))
    )


def get_journal_entry(tenant, entry_id):
    """Return the entry with its lines, or None when tenant+id matches nothing."""
    return _with_lines(JournalEntry.objects.for_tenant(tenant)).get_scoped(
        tenant, entry_id)


def list_journal_entries(tenant):
    return list(
        _with_lines(JournalEntry.objects.for_tenant(tenant)).order_by(
            "-entry_date", "-id")
    )
