"""
Singular/plural conversion for object codes.

Object codes are plural (``assets``, ``opportunities``) while labels and
record names use the singular form, so plain ``s`` stripping is not enough.
"""

IRREGULAR_PLURALS = {
    # CRM objects
    'opportunities': 'opportunity',
    'companies': 'company',
    'categories': 'category',
    'activities': 'activity',
    'properties': 'property',
    'entries': 'entry',
    'histories': 'history',
    'territories': 'territory',
    'deliveries': 'delivery',
    'inventories': 'inventory',
    'currencies': 'currency',
    'countries': 'country',
    'industries': 'industry',
    # irregular words
    'people': 'person',
    'men': 'man',
    'women': 'woman',
    'children': 'child',
    'mice': 'mouse',
    'feet': 'foot',
    'teeth': 'tooth',
    'geese': 'goose',
    # -es words
    'addresses': 'address',
    'statuses': 'status',
    'taxes': 'tax',
    'boxes': 'box',
    'businesses': 'business',
    'processes': 'process',
}

SINGULAR_TO_PLURAL = {singular: plural for plural, singular in IRREGULAR_PLURALS.items()}

SIBILANT_ENDINGS = ('s', 'x', 'z', 'ch', 'sh')


def to_singular(plural):
    """'assets' -> 'asset', 'opportunities' -> 'opportunity', 'boxes' -> 'box'"""
    lower = plural.lower()

    if lower in IRREGULAR_PLURALS:
        return IRREGULAR_PLURALS[lower]

    if lower.endswith('ies'):
        return lower[:-3] + 'y'

    if lower.endswith('es'):
        stem = lower[:-2]
        if stem.endswith(SIBILANT_ENDINGS):
            return stem
        # 'types' -> 'type'
        return lower[:-1]

    if lower.endswith('s'):
        return lower[:-1]

    return lower


def to_plural(singular):
    """'asset' -> 'assets', 'opportunity' -> 'opportunities', 'box' -> 'boxes'"""
    lower = singular.lower()

    if lower in SINGULAR_TO_PLURAL:
        return SINGULAR_TO_PLURAL[lower]

    if len(lower) > 1 and lower.endswith('y') and lower[-2] not in 'aeiou':
        return lower[:-1] + 'ies'

    if lower.endswith(SIBILANT_ENDINGS):
        return lower + 'es'

    return lower + 's'


def capitalize(value):
    if not value:
        return value
    return value[0].upper() + value[1:]


def get_singular_label(object_code):
    """'assets' -> 'Asset'"""
    return capitalize(to_singular(object_code))


def get_plural_label(object_code):
    """'assets' -> 'Assets'"""
    return capitalize(object_code)
