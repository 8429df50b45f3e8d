"""monodeps commands."""

from monodeps.commands.base import Command, CommandContext
from monodeps.commands.publish import (
    PublishCommand,
    PublishOptions,
    PublishResult,
    QueueExecutor,
    handle_publish_command,
    publish,
    run_publish_queue,
)
from monodeps.commands.sync import SyncCommand, SyncResult, handle_sync_command, sync

__all__ = [
    # Base
    "Command",
    "CommandContext",
    # Publish
    "PublishCommand",
    "PublishOptions",
    "PublishResult",
    "QueueExecutor",
    "publish",
    "handle_publish_command",
    "run_publish_queue",
    # Sync
    "SyncCommand",
    "SyncResult",
    "sync",
    "handle_sync_command",
]
