from collections.abc import Mapping

from jobarchive.domain.job.model.value import IconState, JobId
from jobarchive.domain.shared.error import ValidationError
from jobarchive.domain.shared.model.value import ValueObject


class ToggleIntent(ValueObject):
    """What a listing row offers for the visibility toggle of one job."""

    job_id: JobId
    target: bool
    icon: IconState

    @property
    def params(self) -> dict[str, str]:
        """Query parameters that trigger the toggle through ToggleRequest."""
        return {"tid": str(self.job_id), "state": "1" if self.target else ""}


class ToggleRequest(ValueObject):
    """A toggle command carried in request parameters (``tid`` and ``state``)."""

    job_id: JobId
    published: bool

    @classmethod
    def from_params(cls, params: Mapping[str, str]) -> "ToggleRequest | None":
        """Return None when the parameters carry no toggle."""
        tid = params.get("tid") or ""
        if not tid:
            return None
        try:
            job_id = JobId(int(tid))
        except ValueError:
            raise ValidationError(f"Invalid job item ID {tid!r}", field="tid") from None
        return cls(job_id=job_id, published=params.get("state") == "1")
