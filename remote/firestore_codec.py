# remote/firestore_codec.py
# Conversion between plain JSON values and Firestore REST typed values


def encode_value(value):
    if value is None:
        return {'nullValue': None}
    # bool before int: True is an int in Python
    if isinstance(value, bool):
        return {'booleanValue': value}
    if isinstance(value, int):
        return {'integerValue': str(value)}
    if isinstance(value, float):
        return {'doubleValue': value}
    if isinstance(value, str):
        return {'stringValue': value}
    if isinstance(value, (list, tuple)):
        values = [encode_value(v) for v in value]
        return {'arrayValue': {'values': values} if values else {}}
    if isinstance(value, dict):
        return {'mapValue': {'fields': encode_fields(value)}}
    raise TypeError(f'Cannot encode {type(value).__name__} for Firestore')


def encode_fields(data):
    return {str(key): encode_value(value) for key, value in data.items()}


def encode_document(data):
    return {'fields': encode_fields(data)}


def decode_value(typed):
    if 'nullValue' in typed:
        return None
    if 'booleanValue' in typed:
        return bool(typed['booleanValue'])
    if 'integerValue' in typed:
        return int(typed['integerValue'])
    if 'doubleValue' in typed:
        return float(typed['doubleValue'])
    if 'stringValue' in typed:
        return typed['stringValue']
    if 'timestampValue' in typed:
        return typed['timestampValue']
    if 'referenceValue' in typed:
        return typed['referenceValue']
    if 'arrayValue' in typed:
        return [decode_value(v) for v in typed['arrayValue'].get('values', [])]
    if 'mapValue' in typed:
        return decode_fields(typed['mapValue'].get('fields', {}))
    raise ValueError(f'Unsupported Firestore value: {sorted(typed)}')


def decode_fields(fields):
    return {key: decode_value(value) for key, value in (fields or {}).items()}


def decode_document(document):
    if not document:
        return None
    return decode_fields(document.get('fields'))
