"""Canonical option signature for variants."""
from typing import Iterable, Tuple, Union

Selection = Tuple[Union[int, str], Union[int, str]]


def build_variant_key(selections: Iterable[Selection]) -> str:
    """
    Build the canonical key of a variant from its (attribute_id, option_id) selections.

    The key does not depend on the order of the selections, so two variants of
    the same product resolving to the same combination of options always get
    the same key.

    Rules:
    - Both ids are required in every selection
    - An attribute may appear more than once only with the same option
    - Pairs are sorted by attribute then option (string order) and joined
      as "attr:opt|attr:opt"

    Raises:
        ValueError: on an incomplete or contradictory selection.
    """
    seen = {}

    for attribute_id, option_id in selections:
        if attribute_id in (None, '') or option_id in (None, ''):
            raise ValueError('Invalid selection')

        attribute_id, option_id = str(attribute_id), str(option_id)
        existing = seen.get(attribute_id)
        if existing is not None and existing != option_id:
            raise ValueError('Duplicate attribute selection')

        seen[attribute_id] = option_id

    return '|'.join(f'{attr}:{opt}' for attr, opt in sorted(seen.items()))
