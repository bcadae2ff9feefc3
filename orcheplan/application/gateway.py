"""Authorization Gateway.

The single place that turns (actor, project, required role) into a grant
or a denial. Every mutating entry point in ``Workspace`` passes through
``require()`` with the operation's statically declared role.
"""

import logging

from orcheplan.application.role_resolver import RoleResolver
from orcheplan.domain.access.models import (
    Denial,
    DenialReason,
    Grant,
    Operation,
    Role,
    required_role,
)
from orcheplan.domain.shared.errors import DomainError
from orcheplan.domain.shared.result import Err, Ok

logger = logging.getLogger(__name__)


class AuthorizationGateway:
    """Grant or deny a project-scoped request.

    The resolver is asked exactly once per decision and its answer is
    not kept; callers run the decision inside the same store transaction
    as the mutation it guards.
    """

    def __init__(self, resolver: RoleResolver) -> None:
        self._resolver = resolver

    def authorize(
        self,
        actor_id: str,
        project_id: str,
        required: Role,
    ) -> Ok[Grant] | Err[Denial]:
        """Decide whether an actor holds at least ``required`` on a project.

        Args:
            actor_id: Authenticated user id.
            project_id: Project the request targets.
            required: Minimum role the request needs.

        Returns:
            Ok(Grant) or Err(Denial) carrying the precise reason.
        """
        resolved = self._resolver.effective_role(actor_id, project_id)
        if isinstance(resolved, Err):
            return self._deny(actor_id, project_id, DenialReason.NOT_FOUND, Role.NONE, required)

        role = resolved.value
        if role is Role.NONE:
            return self._deny(actor_id, project_id, DenialReason.NOT_A_MEMBER, role, required)
        if not role.at_least(required):
            return self._deny(actor_id, project_id, DenialReason.INSUFFICIENT_ROLE, role, required)

        return Ok(Grant(actor_id=actor_id, project_id=project_id, role=role, required=required))

    def require(
        self,
        actor_id: str,
        project_id: str,
        operation: Operation,
    ) -> Ok[Grant] | Err[DomainError]:
        """Authorize an operation by its table role, with a caller-safe error."""
        decision = self.authorize(actor_id, project_id, required_role(operation))
        if isinstance(decision, Err):
            return Err(decision.error.to_error())
        return decision

    def _deny(
        self,
        actor_id: str,
        project_id: str,
        reason: DenialReason,
        role: Role,
        required: Role,
    ) -> Err[Denial]:
        logger.info(
            f"Denied {actor_id} on project {project_id}: {reason.value} "
            f"(has {role.value}, needs {required.value})"
        )
        return Err(
            Denial(
                actor_id=actor_id,
                project_id=project_id,
                reason=reason,
                role=role,
                required=required,
            )
        )
