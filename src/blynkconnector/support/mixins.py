"""
Mixins for value objects: a readable str() and equality by attribute values.
"""
import threading


def _quoted(value):
    return "None" if value is None else "'%s'" % value


def _public_attributes(obj):
    return sorted((k, v) for k, v in vars(obj).items() if not k.startswith('_'))


class StringerMixin:
    """ str() gives the class name and the public attributes, sorted by name. """

    def __str__(self):
        items = ", ".join("'%s': %s" % (k, _quoted(v)) for k, v in _public_attributes(self))
        return "%s:{%s}" % (type(self).__name__, items)


class CommonEqualityMixin:
    """
    Instances of the same class are equal when all their attributes are equal.
    Comparing two objects that refer back to each other raises ValueError.

    The attributes can change, so instances are unhashable. Use them in lists,
    or key collections by one of their attributes.
    """
    __hash__ = None

    _comparing = threading.local()

    def __eq__(self, other):
        if not isinstance(other, self.__class__):
            return False
        pairs = getattr(CommonEqualityMixin._comparing, 'pairs', None)
        if pairs is None:
            pairs = CommonEqualityMixin._comparing.pairs = set()
        pair = (id(self), id(other))
        if pair in pairs:
            raise ValueError("recursive call %s" % (pair,))
        pairs.add(pair)
        try:
            return vars(self) == vars(other)
        finally:
            pairs.discard(pair)

    def __ne__(self, other):
        return not self.__eq__(other)
