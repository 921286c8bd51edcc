"""Plain-text rendering of service results for MCP tool responses.

Every tool returns one human-readable block.  Success blocks lead with an
emoji marker for the section, failures with ``❌`` and notices that need a
follow-up call (duplicate topic, unconfirmed delete) with ``⚠️``.
"""

import json

from ..models.memory import MemoryEntry
from ..models.responses import (
    DeleteTopicResult,
    EntryLookup,
    EntryResult,
    SearchResult,
    StatsSnapshot,
    TopicSummary,
    TopicView,
)
from ..utils.errors import (
    AlreadyExistsError,
    ConfirmationRequiredError,
    InvalidInputError,
    MemoryStoreError,
    NotFoundError,
    UnsupportedOperationError,
)

NO_DESCRIPTION = "no description"
NO_TAGS = "no tags"
NONE = "none"

ACTION_HELP = {
    "create_topic": "create a new topic (e.g. 'Project notes', 'Reading log')",
    "create_entry": "add an entry to an existing topic",
    "update_topic": "change a topic's description and tags",
    "update_entry": "change an entry's content, importance, context or metadata",
    "delete_topic": "delete a topic and all of its entries (requires confirm: true)",
    "delete_entry": "delete one entry from a topic",
    "list_topics": "list every topic with its basic information",
    "view_topic": "show a topic and its entries",
    "search": "search all entries for a keyword",
    "get_entry": "show a single entry by id",
}


def _tags(tags: list[str]) -> str:
    return ", ".join(tags) or NO_TAGS


def _metadata(metadata: dict) -> str:
    return json.dumps(metadata, ensure_ascii=False, indent=2, default=str)


# ---------------------------------------------------------------------------
# Management
# ---------------------------------------------------------------------------


def format_topic_created(topic: TopicSummary) -> str:
    return (
        f'✅ Topic "{topic.name}" created.\n\n'
        f"Topic info:\n"
        f"- ID: {topic.id}\n"
        f"- Description: {topic.description or NO_DESCRIPTION}\n"
        f"- Tags: {_tags(topic.tags)}\n"
        f"- Created: {topic.created_at}\n"
        f"- Entries: {topic.entry_count}"
    )


def format_topic_updated(topic: TopicSummary) -> str:
    return (
        f'✅ Topic "{topic.name}" updated.\n\n'
        f"Current info:\n"
        f"- Description: {topic.description or NO_DESCRIPTION}\n"
        f"- Tags: {_tags(topic.tags)}\n"
        f"- Entries: {topic.entry_count}\n"
        f"- Last updated: {topic.updated_at}"
    )


def format_topic_deleted(result: DeleteTopicResult) -> str:
    return (
        f'✅ Topic "{result.topic.name}" deleted.\n\n'
        f"Removed:\n"
        f"- Topic: {result.topic.name}\n"
        f"- Entries: {result.removed_entries}\n"
        f"- Description: {result.topic.description or NO_DESCRIPTION}\n\n"
        f"{result.remaining_topics} topic(s) remain."
    )


def format_entry_created(result: EntryResult) -> str:
    entry = result.entry
    return (
        f'✅ Entry added to topic "{result.topic.name}".\n\n'
        f"Entry info:\n"
        f"- ID: {entry.id}\n"
        f"- Importance: {entry.importance}\n"
        f"- Content: {entry.content}\n"
        f"- Context: {entry.context or NONE}\n"
        f"- Created: {entry.created_at}\n\n"
        f'Topic "{result.topic.name}" now has {result.topic.entry_count} entries.'
    )


def format_entry_updated(result: EntryResult) -> str:
    entry = result.entry
    return (
        f"✅ Entry updated.\n\n"
        f"Current info:\n"
        f"- Entry ID: {entry.id}\n"
        f"- Content: {entry.content}\n"
        f"- Importance: {entry.importance}\n"
        f"- Context: {entry.context or NONE}\n"
        f"- Last updated: {entry.updated_at}\n\n"
        f'Topic "{result.topic.name}" updated as well.'
    )


def format_entry_deleted(result: EntryResult) -> str:
    entry = result.entry
    return (
        f"✅ Entry deleted.\n\n"
        f"Removed entry:\n"
        f"- Topic: {result.topic.name}\n"
        f"- Entry ID: {entry.id}\n"
        f"- Content: {entry.content}\n"
        f"- Importance: {entry.importance}\n\n"
        f'Topic "{result.topic.name}" now has {result.topic.entry_count} entries.'
    )


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


def format_topic_list(topics: list[TopicSummary]) -> str:
    if not topics:
        return (
            "📚 Memory topics\n\n"
            "No topics have been created yet.\n\n"
            "💡 Getting started:\n"
            '1. Call memory_manage with action: "create_topic" to create a topic\n'
            '2. Then call memory_manage with action: "create_entry" to add entries to it'
        )

    text = f"📚 Memory topics ({len(topics)} total)\n"
    for topic in topics:
        text += (
            f"\n--- {topic.name} ---\n"
            f"📝 Description: {topic.description or NO_DESCRIPTION}\n"
            f"🏷️ Tags: {_tags(topic.tags)}\n"
            f"📊 Entries: {topic.entry_count}\n"
            f"📅 Created: {topic.created_at}\n"
            f"🔄 Last updated: {topic.updated_at}\n"
        )
    return text


def _entry_block(index: int, entry: MemoryEntry) -> str:
    text = (
        f"\n--- Entry {index} ---\n"
        f"🆔 ID: {entry.id}\n"
        f"⭐ Importance: {entry.importance}\n"
        f"📅 Created: {entry.created_at}\n"
        f"💭 Content: {entry.content}"
    )
    if entry.context:
        text += f"\n🔗 Context: {entry.context}"
    if entry.metadata:
        text += f"\n📊 Metadata: {_metadata(entry.metadata)}"
    return text + "\n"


def format_topic_view(view: TopicView) -> str:
    topic = view.topic
    text = (
        f'📚 Topic: "{topic.name}"\n\n'
        f"📝 Topic info:\n"
        f"- Description: {topic.description or NO_DESCRIPTION}\n"
        f"- Tags: {_tags(topic.tags)}\n"
        f"- Total entries: {view.total}\n"
        f"- Created: {topic.created_at}\n"
        f"- Last updated: {topic.updated_at}\n\n"
        f"📋 Entries (showing {len(view.entries)}, sorted by {view.sort_by}):\n"
    )
    if not view.entries:
        text += "\nNo entries yet."
    for index, entry in enumerate(view.entries, start=1):
        text += _entry_block(index, entry)
    if view.hidden:
        text += f"\n... {view.hidden} more entries not shown."
    return text


def format_search(result: SearchResult) -> str:
    text = (
        f"🔍 Search results\n\n"
        f'🔎 Query: "{result.query}"\n'
        f"📊 Importance filter: {result.importance}\n"
        f"📈 Found {result.total} matching entries\n"
        f"📋 Showing {len(result.hits)}:\n"
    )
    if not result.hits:
        text += "\nNo matching entries."
    for index, hit in enumerate(result.hits, start=1):
        entry = hit.entry
        text += (
            f"\n--- Result {index} ---\n"
            f"📚 Topic: {hit.topic}\n"
            f"🆔 Entry ID: {entry.id}\n"
            f"🎯 Relevance: {hit.relevance}\n"
            f"⭐ Importance: {entry.importance}\n"
            f"📅 Created: {entry.created_at}\n"
            f"💭 Content: {entry.content}"
        )
        if entry.context:
            text += f"\n🔗 Context: {entry.context}"
        text += "\n"
    if result.hidden:
        text += f"\n... {result.hidden} more results not shown."
    return text


def format_entry_detail(lookup: EntryLookup) -> str:
    entry = lookup.entry
    lines = [
        "🔍 Entry details\n",
        f"🏷️ Entry ID: {entry.id}",
        f"📚 Topic: {lookup.topic}",
        f"⭐ Importance: {entry.importance}",
        f"📅 Created: {entry.created_at}",
        f"🔄 Updated: {entry.updated_at or entry.created_at}",
        f"💭 Content: {entry.content}",
    ]
    if entry.context:
        lines.append(f"🔗 Context: {entry.context}")
    if entry.metadata:
        lines.append(f"📊 Metadata: {_metadata(entry.metadata)}")
    return "\n".join(lines)


def format_stats(stats: StatsSnapshot) -> str:
    dist = stats.importance_distribution
    if stats.average_entries_per_topic is not None:
        efficiency = f"Average entries per topic: {stats.average_entries_per_topic:.2f}"
    else:
        efficiency = "No data yet"
    return (
        f"📊 Memory statistics\n\n"
        f"📈 Totals:\n"
        f"Topics: {stats.total_topics}\n"
        f"Entries: {stats.total_entries}\n"
        f"Memory footprint: {stats.total_size_kb:.2f}KB\n"
        f"Average entry size: {stats.average_entry_size:.2f} characters\n\n"
        f"⭐ Importance distribution:\n"
        f"High: {dist.get('high', 0)}\n"
        f"Medium: {dist.get('medium', 0)}\n"
        f"Low: {dist.get('low', 0)}\n\n"
        f"🔄 Usage:\n"
        f"Last access: {stats.last_access_time or 'never'}\n"
        f"Access count: {stats.access_count}\n\n"
        f"💾 Storage efficiency:\n"
        f"{efficiency}"
    )


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


def format_error(exc: MemoryStoreError) -> str:
    """Render an expected operation failure."""
    if isinstance(exc, AlreadyExistsError):
        topic = exc.existing
        return (
            f'⚠️ Topic "{topic.name}" already exists and was not created again.\n\n'
            f"Existing topic:\n"
            f"- Description: {topic.description or NO_DESCRIPTION}\n"
            f"- Tags: {_tags(topic.tags)}\n"
            f"- Entries: {topic.entry_count}\n\n"
            f'To add entries to this topic, use action: "create_entry".'
        )
    if isinstance(exc, ConfirmationRequiredError):
        topic = exc.preview
        return (
            f'⚠️ Confirm deletion of topic "{topic.name}"?\n\n'
            f"Topic info:\n"
            f"- Description: {topic.description or NO_DESCRIPTION}\n"
            f"- Tags: {_tags(topic.tags)}\n"
            f"- Entries: {topic.entry_count}\n"
            f"- Created: {topic.created_at}\n\n"
            f"⚠️ Deleted topics cannot be recovered.\n\n"
            f"To delete it, call again with confirm: true."
        )
    if isinstance(exc, NotFoundError):
        if exc.kind == "topic":
            return (
                f'❌ Topic "{exc.key}" does not exist.\n\n'
                f'💡 Create it with memory_manage action: "create_topic", '
                f'or use memory_query action: "list_topics" to see existing topics.'
            )
        return f"❌ {exc}."
    if isinstance(exc, UnsupportedOperationError):
        lines = [f"❌ Unsupported action: {exc.action}\n", "💡 Supported actions:"]
        for action in exc.supported:
            lines.append(f"- {action}: {ACTION_HELP[action]}" if action in ACTION_HELP else f"- {action}")
        return "\n".join(lines)
    if isinstance(exc, InvalidInputError):
        return f"❌ {exc}."
    return f"❌ {exc}"


def format_validation_error(problems: list[str]) -> str:
    """Render tool-input validation failures, one per line."""
    return "❌ Invalid input:\n" + "\n".join(f"- {problem}" for problem in problems)


def format_failure(operation: str, exc: Exception) -> str:
    """Render an unexpected fault caught at the tool boundary."""
    return f"❌ {operation} failed: {exc}"
