"""Base for domain services declared as plain annotated collaborators."""

from dataclasses import dataclass
from typing import Any, dataclass_transform


@dataclass_transform(kw_only_default=True)
class _Collaborators(type):
    def __new__(mcs, name: str, bases: tuple[type, ...], namespace: dict[str, Any]):
        service_cls = super().__new__(mcs, name, bases, namespace)
        is_subclass = any(isinstance(base, mcs) for base in bases)
        return dataclass(kw_only=True)(service_cls) if is_subclass else service_cls


class Service(metaclass=_Collaborators):
    """Subclasses list their collaborators as fields and are built by keyword:

        class VersionLedger(Service):
            versions: VersionRepository
            sources: Mapping[str, SnapshotSource]

        VersionLedger(versions=repo, sources={JOB_KIND: jobs})
    """
