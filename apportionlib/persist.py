'''Serialization of apportionment results and evaluators to JSON-ready dicts.

The result consumer (report generation, an API response, an audit log) needs
the results in a plain form; this module provides it without the engine doing
any I/O itself. Classes decorated with :func:`simple_serialization` gain
a ``to_dict()`` method; :func:`from_dict` restores the original object.

Fractions are stored with their exact numerator and denominator so that
a stored quota or threshold compares equal to the computed one.
'''

import sys
import inspect
import builtins
import importlib
import dataclasses
from fractions import Fraction
from typing import Any, List, Dict, Callable


def simple_serialization(class_: type) -> type:
    '''A decorator to provide a simple to_dict() serialization method.

    Serializes the fields of a dataclass, or the attributes named like the
    constructor parameters of any other class. The class must therefore
    store its constructor arguments unchanged.

    :param class_: The class to add the method to.
    '''
    if dataclasses.is_dataclass(class_):
        param_names = [
            field.name for field in dataclasses.fields(class_) if field.init
        ]
    else:
        param_names = list(inspect.signature(
            class_.__init__
        ).parameters.keys())
        if 'self' in param_names:
            param_names.remove('self')

    def to_dict(self) -> Dict[str, Any]:
        out_dict = {'class': scoped_class_name(self)}
        for attr in param_names:
            out_dict[attr] = serialize_value(getattr(self, attr))
        return out_dict

    class_.to_dict = to_dict
    return class_


def serialize_value(value: Any) -> Any:
    if hasattr(value, 'to_dict'):
        return value.to_dict()
    elif isinstance(value, tuple(ATOMIC_TYPES)):
        return value
    elif type(value) in CONVERTIBLE_TYPES:
        return CONVERTIBLE_TYPES[type(value)](value)
    elif hasattr(value, 'items') and hasattr(value, 'keys'):
        if all(isinstance(key, str) for key in value.keys()):
            return {key: serialize_value(val) for key, val in value.items()}
        else:
            return {
                'type': 'dict',
                'keys': [serialize_value(key) for key in value.keys()],
                'values': [serialize_value(val) for val in value.values()]
            }
    elif isinstance(value, list):
        return [serialize_value(val) for val in value]
    else:
        raise ValueError(f'cannot serialize {value!r} to dict format')


def deserialize_value(value: Any) -> Any:
    if isinstance(value, dict):
        if 'type' in value and is_scoped_identifier(value['type']):
            return deserialize_typed(value)
        elif 'class' in value and is_scoped_identifier(value['class']):
            return deserialize_class(value)
        else:
            return {key: deserialize_value(val) for key, val in value.items()}
    elif isinstance(value, tuple(ATOMIC_TYPES)):
        return value
    elif isinstance(value, list):
        return [deserialize_value(val) for val in value]
    else:
        raise ValueError(f'cannot deserialize {value!r}, type unknown')


def deserialize_typed(typedef: Dict[str, Any]) -> Any:
    typeobj = get_object(typedef['type'])
    if typeobj is dict:
        return dict(zip(
            [deserialize_value(key) for key in typedef['keys']],
            [deserialize_value(val) for val in typedef['values']]
        ))
    elif 'value' in typedef:
        return typeobj(deserialize_value(typedef['value']))
    elif 'arguments' in typedef:
        return typeobj(*[
            deserialize_value(val) for val in typedef['arguments']
        ])
    else:
        raise ValueError(f'invalid typed value contents: {typedef!r}')


def deserialize_class(clsdef: Dict[str, Any]) -> Any:
    cls = get_object(clsdef['class'])
    params = {
        key: deserialize_value(val)
        for key, val in clsdef.items() if key != 'class'
    }
    return cls(**params)


def get_object(identifier: str) -> Any:
    if '.' not in identifier:
        global_vars = globals()
        if identifier in global_vars:
            return global_vars[identifier]
        else:
            return getattr(builtins, identifier)
    else:
        module, name = identifier.rsplit('.', 1)
        if module not in sys.modules:
            importlib.import_module(module)
        return getattr(sys.modules[module], name)


def from_dict(value: Dict[str, Any]) -> Any:
    """Restore a result or evaluator object from a JSON-like dictionary.

    :param value: A dictionary created by :func:`to_dict`.
    """
    if not isinstance(value, dict):
        raise ValueError('invalid apportionlib object def: dict expected, '
                         f'got {value!r}')
    elif 'class' not in value:
        raise ValueError('invalid apportionlib object def: must have a class key')
    elif not is_scoped_identifier(value['class']):
        raise ValueError(f"invalid apportionlib class def: {value['class']}")
    else:
        return deserialize_value(value)


def to_dict(obj: Any) -> Dict[str, Any]:
    """Serialize a result or evaluator object to a JSON-ready dictionary."""
    return serialize_value(obj)


def is_scoped_identifier(value: Any) -> bool:
    return (
        isinstance(value, str)
        and not value.startswith('.')
        and all(chunk.isidentifier() for chunk in value.split('.'))
    )


def scoped_class_name(value: Any) -> str:
    cls = value.__class__
    return '.'.join((cls.__module__, cls.__name__))


def fraction_to_json(f: Fraction) -> Dict[str, Any]:
    return {'type': 'Fraction', 'arguments': [f.numerator, f.denominator]}


def tuple_to_json(seq: tuple) -> Dict[str, Any]:
    return {'type': 'tuple', 'value': [serialize_value(v) for v in seq]}


ATOMIC_TYPES: List[type] = [
    str, int, bool, type(None),
]

CONVERTIBLE_TYPES: Dict[type, Callable] = {
    Fraction: fraction_to_json,
    tuple: tuple_to_json,
}
