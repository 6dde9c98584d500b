"""
Explicit status state machines.

Every status field (order, payment, driver assignment) owns one
``StateMachine`` listing its legal ``(from, to)`` pairs. Models call
``apply`` instead of assigning the field directly.
"""
import logging

from django.core.exceptions import ValidationError

logger = logging.getLogger(__name__)


class InvalidTransitionError(ValidationError):
    """Raised when a status change is not allowed by its state machine."""

    def __init__(self, machine, current, target, message=None):
        self.machine = machine
        self.current = current
        self.target = target
        if message is None:
            message = f"Cannot change {machine} status from '{current}' to '{target}'."
        super().__init__(message, code='invalid_transition')


class StateMachine:

    def __init__(self, name, transitions):
        self.name = name
        self.transitions = {state: frozenset(targets) for state, targets in transitions.items()}
        states = set(self.transitions)
        for targets in self.transitions.values():
            states.update(targets)
        self.states = frozenset(states)

    def __repr__(self):
        return f"StateMachine({self.name!r})"

    def is_terminal(self, state):
        return not self.transitions.get(state)

    def allowed_targets(self, state):
        return sorted(self.transitions.get(state, ()))

    def can_transition(self, current, target):
        if target not in self.states:
            return False
        # Re-applying the current status is accepted as a no-op.
        if current == target:
            return True
        return target in self.transitions.get(current, ())

    def check(self, current, target):
        if target not in self.states:
            raise InvalidTransitionError(
                self.name, current, target,
                message=f"Unknown {self.name} status '{target}'. Must be one of {sorted(self.states)}.",
            )
        if not self.can_transition(current, target):
            logger.warning(f"Rejected {self.name} transition {current} -> {target}")
            raise InvalidTransitionError(self.name, current, target)

    def apply(self, instance, target, field='status'):
        """
        Validate and set ``instance.<field>`` to ``target`` without saving.

        Returns True when the value changed, False for an idempotent re-apply.
        """
        current = getattr(instance, field)
        self.check(current, target)
        if current == target:
            return False
        setattr(instance, field, target)
        return True
