"""
Expression building helpers.

Turns plain ``{attribute: value}`` mappings into DynamoDB expression strings
plus the ``ExpressionAttributeNames`` / ``ExpressionAttributeValues``
placeholder maps they reference. Attribute names and values never appear
inline in an expression; every name is bound as ``#name`` and every value as
``:name`` (or ``:nameStart`` / ``:nameEnd`` for a two-element range).

All functions are pure. Clause order follows the iteration order of the
input mapping, so identical input always yields identical output.

Example:
    >>> build_key_condition({'status': 'active', 'age': [18, 30]})
    ('#status = :status AND #age BETWEEN :ageStart AND :ageEnd',
     {'#status': 'status', '#age': 'age'},
     {':status': 'active', ':ageStart': 18, ':ageEnd': 30})
"""

from typing import Any, Dict, List, Mapping, Optional, Tuple

ExpressionNames = Dict[str, str]
ExpressionValues = Dict[str, Any]

NAMES_PARAM = 'ExpressionAttributeNames'
VALUES_PARAM = 'ExpressionAttributeValues'


def is_range(value: Any) -> bool:
    """Return True if value is a ``[start, end]`` pair."""
    return isinstance(value, (list, tuple)) and len(value) == 2


def _bind(
    name: str,
    value: Any,
    names: ExpressionNames,
    values: ExpressionValues
) -> None:
    names[f"#{name}"] = name
    if is_range(value):
        values[f":{name}Start"] = value[0]
        values[f":{name}End"] = value[1]
    else:
        values[f":{name}"] = value


def build_key_condition(
    key_spec: Mapping[str, Any]
) -> Tuple[str, ExpressionNames, ExpressionValues]:
    """Build a KeyConditionExpression from a key specification.

    Args:
        key_spec: Attribute name to value, or to a ``[start, end]`` pair for
            an inclusive BETWEEN range

    Returns:
        Tuple of (expression, expression_attribute_names, expression_attribute_values)
    """
    names: ExpressionNames = {}
    values: ExpressionValues = {}
    clauses: List[str] = []

    for name, value in key_spec.items():
        if is_range(value):
            clauses.append(f"#{name} BETWEEN :{name}Start AND :{name}End")
        else:
            clauses.append(f"#{name} = :{name}")
        _bind(name, value, names, values)

    return " AND ".join(clauses), names, values


def _filter_parts(filter_spec: Any) -> Tuple[Optional[str], Optional[Mapping[str, Any]]]:
    if filter_spec is None:
        return None, None
    if isinstance(filter_spec, Mapping):
        return filter_spec.get('condition'), filter_spec.get('keys')
    return getattr(filter_spec, 'condition', None), getattr(filter_spec, 'keys', None)


def build_filter_expression(
    filter_spec: Any,
    names: Optional[ExpressionNames] = None,
    values: Optional[ExpressionValues] = None
) -> Tuple[Optional[str], ExpressionNames, ExpressionValues]:
    """Bind the placeholders of a caller-written FilterExpression.

    The condition is used verbatim (e.g. ``"#age > :age"``); only the keys
    mapping is translated into placeholder bindings, using the same
    range-vs-scalar rule as key conditions. Nothing is contributed unless
    the filter carries both a condition and a keys mapping; an empty mapping
    still counts, for conditions that reference no placeholders.

    Args:
        filter_spec: FilterSpec or mapping with ``condition`` and ``keys``
        names: Placeholder names already bound for this request
        values: Placeholder values already bound for this request

    Returns:
        Tuple of (condition or None, names, values). The returned maps are
        the ones passed in, extended in place.
    """
    names = {} if names is None else names
    values = {} if values is None else values

    condition, keys = _filter_parts(filter_spec)
    if not condition or keys is None:
        return None, names, values

    for name, value in keys.items():
        _bind(name, value, names, values)

    return condition, names, values


def build_update_expression(
    update_spec: Mapping[str, Any]
) -> Tuple[str, ExpressionNames, ExpressionValues]:
    """Build a ``set`` UpdateExpression assigning every entry of update_spec.

    Example:
        >>> build_update_expression({'name': 'Bob'})
        ('set #name = :name', {'#name': 'name'}, {':name': 'Bob'})
    """
    names: ExpressionNames = {}
    values: ExpressionValues = {}
    assignments: List[str] = []

    for name, value in update_spec.items():
        assignments.append(f"#{name} = :{name}")
        names[f"#{name}"] = name
        values[f":{name}"] = value

    if not assignments:
        return "", names, values

    return f"set {', '.join(assignments)}", names, values


def upper_first(key: str) -> str:
    """Upper-case the first character of key (``limit`` -> ``Limit``)."""
    return key[:1].upper() + key[1:]


def merge_overrides(
    params: Mapping[str, Any],
    overrides: Optional[Mapping[str, Any]] = None
) -> Dict[str, Any]:
    """Return a copy of params with the caller's raw overrides applied.

    Override keys use DynamoDB parameter names with a lower-case first
    letter (``exclusiveStartKey``, ``indexName``...); they are capitalised
    and replace any generated value of the same name.
    """
    merged = dict(params)
    for key, value in (overrides or {}).items():
        merged[upper_first(key)] = value
    return merged


def prune_empty_placeholders(params: Mapping[str, Any]) -> Dict[str, Any]:
    """Drop placeholder maps that ended up empty (DynamoDB rejects them)."""
    pruned = dict(params)
    for param in (NAMES_PARAM, VALUES_PARAM):
        if param in pruned and not pruned[param]:
            del pruned[param]
    return pruned
