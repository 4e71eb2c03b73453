"""
Conflict resolution policies.

Each policy combines two method implementations into one::

    merged = policy(new_impl, existing_impl)

``new_impl`` comes from the participant currently being folded in;
``existing_impl`` is already in the accumulator from an earlier participant.
Every implementation takes the receiver as its first argument.

=========  ===================  =====================  ==================
Policy     existing_impl        new_impl               returns
=========  ===================  =====================  ==================
overwrite  not wrapped          not wrapped            ``existing_impl``
discard    not wrapped          not wrapped            ``new_impl``
before     called first         called second          new's result
after      called second        called first           existing's result
around     via ``proceed``      called first           new's result
=========  ===================  =====================  ==================

.. warning::

   The names do not read the way they behave.  ``overwrite`` keeps the
   implementation that was already there and ``discard`` keeps the incoming
   one.  ``around`` calls ``new_impl(receiver, proceed, *args, **kwargs)``
   where ``proceed`` is ``existing_impl`` bound to the receiver.  Rely on the
   table, not on the names.
"""

from __future__ import annotations

import functools
from typing import Any, Callable, Union

from traitcore.errors import UnknownPolicyError
from traitcore.types import Policy

Method = Callable[..., Any]
PolicyFn = Callable[[Method, Method], Method]


def overwrite(new_impl: Method, existing_impl: Method) -> Method:
    return existing_impl


def discard(new_impl: Method, existing_impl: Method) -> Method:
    return new_impl


def before(new_impl: Method, existing_impl: Method) -> Method:
    @functools.wraps(new_impl)
    def merged(receiver, *args, **kwargs):
        existing_impl(receiver, *args, **kwargs)
        return new_impl(receiver, *args, **kwargs)

    return merged


def after(new_impl: Method, existing_impl: Method) -> Method:
    @functools.wraps(existing_impl)
    def merged(receiver, *args, **kwargs):
        new_impl(receiver, *args, **kwargs)
        return existing_impl(receiver, *args, **kwargs)

    return merged


def around(new_impl: Method, existing_impl: Method) -> Method:
    @functools.wraps(new_impl)
    def merged(receiver, *args, **kwargs):
        proceed = functools.partial(existing_impl, receiver)
        return new_impl(receiver, proceed, *args, **kwargs)

    return merged


POLICIES: dict[str, PolicyFn] = {
    Policy.OVERWRITE.value: overwrite,
    Policy.DISCARD.value: discard,
    Policy.BEFORE.value: before,
    Policy.AFTER.value: after,
    Policy.AROUND.value: around,
}


def policy_tag(policy: Union[str, Policy]) -> str:
    """Normalize a ``Policy`` member or raw string to its tag."""
    if isinstance(policy, Policy):
        return policy.value
    return str(policy)


def get_policy(policy: Union[str, Policy], method_name: str | None = None) -> PolicyFn:
    """Look up a policy function by tag.

    Raises:
        UnknownPolicyError: If the tag is not one of the five policies.
    """
    tag = policy_tag(policy)
    try:
        return POLICIES[tag]
    except KeyError:
        raise UnknownPolicyError(tag, method_name) from None
