"""
Structured records for the project document returned by the /project endpoint.

Each record declares the JSON members it understands. Parsing checks the type of every
member that is present; absent or null members are left as None and unknown members are
ignored. A member of the wrong type raises ProjectFormatError.
"""
from blynkconnector.errors import ProjectFormatError
from blynkconnector.pins import PinType
from blynkconnector.support.mixins import CommonEqualityMixin, StringerMixin


class Field:
    """ describes a JSON member: the attribute it maps to and how its value is checked. """
    def __init__(self, attribute, check):
        self.attribute = attribute
        self.check = check


def integer(name, value):
    if isinstance(value, bool) or not isinstance(value, int):
        raise ProjectFormatError("%s should be an integer, not %r" % (name, value))
    return value


def number(name, value):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ProjectFormatError("%s should be a number, not %r" % (name, value))
    return float(value)


def boolean(name, value):
    if not isinstance(value, bool):
        raise ProjectFormatError("%s should be a boolean, not %r" % (name, value))
    return value


def string(name, value):
    if not isinstance(value, str):
        raise ProjectFormatError("%s should be a string, not %r" % (name, value))
    return value


def text(name, value):
    """ a scalar that is kept as its string form """
    if isinstance(value, (dict, list)):
        raise ProjectFormatError("%s should be a scalar, not %r" % (name, value))
    return value if isinstance(value, str) else str(value)


def string_map(name, value):
    if not isinstance(value, dict) or not all(isinstance(v, str) for v in value.values()):
        raise ProjectFormatError("%s should map names to strings, not %r" % (name, value))
    return dict(value)


def record(cls):
    def check(name, value):
        return cls.from_json(value, name)
    return check


def records(cls):
    def check(name, value):
        if not isinstance(value, list):
            raise ProjectFormatError("%s should be a list, not %r" % (name, value))
        return [cls.from_json(item, "%s[%d]" % (name, i)) for i, item in enumerate(value)]
    return check


class Record(CommonEqualityMixin, StringerMixin):
    fields = {}

    def __init__(self, **kwargs):
        for f in self.fields.values():
            setattr(self, f.attribute, None)
        for k, v in kwargs.items():
            setattr(self, k, v)

    @classmethod
    def from_json(cls, data, name=None):
        name = name or cls.__name__
        if not isinstance(data, dict):
            raise ProjectFormatError("%s should be an object, not %r" % (name, data))
        result = cls()
        for key, f in cls.fields.items():
            value = data.get(key)
            if value is not None:
                setattr(result, f.attribute, f.check("%s.%s" % (name, key), value))
        return result


class ButtonState(Record):
    fields = {
        'textColor': Field('text_color', integer),
        'backgroundColor': Field('background_color', integer),
    }


class Device(Record):
    fields = {
        'id': Field('id', integer),
        'name': Field('name', string),
        'boardType': Field('board_type', string),
        'vendor': Field('vendor', string),
        'connectionType': Field('connection_type', string),
        'isUserIcon': Field('is_user_icon', boolean),
    }


class Widget(Record):
    fields = {
        'type': Field('type', string),
        'id': Field('id', integer),
        'x': Field('x', integer),
        'y': Field('y', integer),
        'color': Field('color', integer),
        'width': Field('width', integer),
        'height': Field('height', integer),
        'tabId': Field('tab_id', integer),
        'isDefaultColor': Field('is_default_color', boolean),
        'deviceId': Field('device_id', integer),
        'pinType': Field('pin_type', string),
        'pin': Field('pin', integer),
        'pwmMode': Field('pwm_mode', boolean),
        'rangeMappingOn': Field('range_mapping_on', boolean),
        'min': Field('min', number),
        'max': Field('max', number),
        'value': Field('value', text),
        'pushMode': Field('push_mode', boolean),
        'onButtonState': Field('on_button_state', record(ButtonState)),
        'offButtonState': Field('off_button_state', record(ButtonState)),
        'fontSize': Field('font_size', string),
        'edge': Field('edge', string),
        'buttonStyle': Field('button_style', string),
        'lockSize': Field('lock_size', boolean),
        'label': Field('label', string),
        'androidTokens': Field('android_tokens', string_map),
        'notifyWhenOffline': Field('notify_when_offline', boolean),
        'notifyWhenOfflineIgnorePeriod': Field('notify_when_offline_ignore_period', integer),
        'priority': Field('priority', string),
    }

    @property
    def pin_kind(self):
        """ the PinType of the widget's pin, or None if the widget is not bound to a pin """
        return {
            'ANALOG': PinType.ANALOG,
            'DIGITAL': PinType.DIGITAL,
            'VIRTUAL': PinType.VIRTUAL,
        }.get((self.pin_type or '').upper())


class Project(Record):
    fields = {
        'id': Field('id', integer),
        'parentId': Field('parent_id', integer),
        'isPreview': Field('is_preview', boolean),
        'name': Field('name', string),
        'createdAt': Field('created_at', integer),
        'updatedAt': Field('updated_at', integer),
        'widgets': Field('widgets', records(Widget)),
        'devices': Field('devices', records(Device)),
        'theme': Field('theme', string),
        'keepScreenOn': Field('keep_screen_on', boolean),
        'isAppConnectedOn': Field('is_app_connected_on', boolean),
        'isNotificationsOff': Field('is_notifications_off', boolean),
        'isShared': Field('is_shared', boolean),
        'isActive': Field('is_active', boolean),
        'widgetBackgroundOn': Field('widget_background_on', boolean),
        'color': Field('color', integer),
        'isDefaultColor': Field('is_default_color', boolean),
    }

    @classmethod
    def from_json(cls, data, name=None):
        project = super().from_json(data, name)
        project.widgets = project.widgets or []
        project.devices = project.devices or []
        return project

    def widgets_for_pin(self, number, kind: PinType):
        """ the widgets bound to the given pin """
        return [w for w in self.widgets if w.pin == number and w.pin_kind is kind]
