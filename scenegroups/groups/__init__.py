from .definition import ResourceGroupDefinition, ResourceKind, ResourceReference, RoleTag
from .events import EventHook, GroupLifecycleListener
from .manifest import GroupManifest, loadGroupDefinition, loadGroupManifest
from .operations import CombinedProgress, DirectOperationGroup, IndirectHandleGroup, ProgressSource
from .orchestrator import GroupOrchestrator, ProgressReporter
from .runtimes import LoadMode

__all__ = [
    "ResourceGroupDefinition",
    "ResourceKind",
    "ResourceReference",
    "RoleTag",
    "EventHook",
    "GroupLifecycleListener",
    "GroupManifest",
    "loadGroupDefinition",
    "loadGroupManifest",
    "CombinedProgress",
    "DirectOperationGroup",
    "IndirectHandleGroup",
    "ProgressSource",
    "GroupOrchestrator",
    "ProgressReporter",
    "LoadMode",
]
