"""Error taxonomy shared by the fulfillment engine.

Every domain exception raised by a service derives from one of these
categories.  The API layer maps categories to HTTP status codes, so new
exceptions only need to pick the right parent.

- ``NotFoundError``: unknown order/job/agent.  Not retryable without new input.
- ``ConflictError``: claim race lost, invalid or terminal transition.
  Surfaced immediately, never retried automatically.
- ``PermissionDenied``: the caller lacks the capability for the operation.
- ``IdempotentNoOp``: a duplicate signal.  Logged and treated as success.
- ``DownstreamFailure``: a side effect failed (notification recipient,
  address resolution).  Logged and swallowed, never rolls back the
  primary state transition.
"""

from __future__ import annotations


class DomainError(Exception):
    """Base class for every fulfillment domain error."""

    default_code = "domain_error"

    @property
    def code(self) -> str:
        return self.default_code


class NotFoundError(DomainError):
    default_code = "not_found"


class ConflictError(DomainError):
    default_code = "conflict"


class PermissionDenied(DomainError):
    default_code = "permission_denied"


class IdempotentNoOp(DomainError):
    default_code = "no_op"


class DownstreamFailure(DomainError):
    default_code = "downstream_failure"
