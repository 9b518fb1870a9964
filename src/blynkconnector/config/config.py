"""
Loads client settings from layered configuration files.

The packaged defaults are merged with a platform specialization, a user file in the
home directory and finally a local file. The result is validated against the packaged
schema, which also converts each value to its declared type.
"""
import os
import platform

from configobj import ConfigObj, ConfigObjError, Section
from validate import Validator

from blynkconnector.api import DEFAULT_URI
from blynkconnector.support.mixins import CommonEqualityMixin, StringerMixin

config_extension = '.cfg'

# files are named blynk.cfg, blynk.default.cfg, blynk.schema.cfg, blynk.<os>.cfg
config_name = 'blynk'

# holds the default, schema and platform files
package_directory = os.path.dirname(__file__)


def config_flavor(name, flavor=None):
    """
    >>> config_flavor('blynk', 'default')
    'blynk.default'
    """
    return '%s.%s' % (name, flavor) if flavor else name


def config_filename(name, directory=None):
    return os.path.join(directory or package_directory, name + config_extension)


def load_config_file_base(file, must_exist=True):
    """
    Parses a single configuration file.
    :param must_exist: when False, a missing file gives an empty configuration rather than an IOError.
    :raises ConfigObjError: the file is not valid configobj syntax. The message names the file.
    """
    if not must_exist and not os.path.exists(file):
        return ConfigObj()
    try:
        return ConfigObj(file, interpolation='Template', file_error=True)
    except ConfigObjError as e:
        raise type(e)('%s at %s' % (e, file))


def config_flavor_file(name, directory, flavor=None) -> ConfigObj:
    """ the flavored file in the directory, or an empty configuration if there is none. """
    return load_config_file_base(config_filename(config_flavor(name, flavor), directory), must_exist=False)


def map_os_name(name):
    """
    >>> map_os_name('Linux')
    'linux'
    >>> map_os_name("Darwin")
    'osx'
    """
    name = name.lower()
    return 'osx' if name == 'darwin' else name


def os_name():
    return map_os_name(platform.system())


def load_config(file=None, name=config_name, directory=package_directory, user_directory='~'):
    """
    Builds the client configuration. Each layer overrides the ones before it:
    <name>.default.cfg, then <name>.<os>.cfg, both in `directory`,
    then <name>.cfg in `user_directory`, then `file`.
    The merged configuration is validated and typed by <name>.schema.cfg.

    :param file: the local configuration file. It must exist when given.
    :raises ConfigObjError: when a file cannot be parsed or a value fails validation.
    """
    layers = [
        config_flavor_file(name, directory, 'default'),
        config_flavor_file(name, directory, os_name()),
        load_config_file_base(os.path.expanduser(config_filename(name, user_directory)), must_exist=False),
    ]
    if file:
        layers.append(load_config_file_base(file))

    config = ConfigObj()
    for layer in layers:
        config.merge(layer)

    config.configspec = ConfigObj(config_filename(config_flavor(name, 'schema'), directory),
                                  file_error=True, _inspec=True)
    result = config.validate(Validator(), preserve_errors=True)
    if result is not True:
        raise ConfigObjError("the config file %s failed validation %s" % (file or name, result))
    return config


def fetch_conf_path(conf: Section, path):
    """
    Walks down the named sections.
    :return: the section at the end of the path, or None if any part is missing.
    """
    for part in path:
        conf = conf.get(part)
        if conf is None:
            return None
    return conf


def apply_conf_path(conf: Section, path, target):
    section = fetch_conf_path(conf, path)
    if section:
        apply_conf(section, target)


def apply_conf(conf: Section, target):
    """
    Copies each scalar value in the section onto the target attribute of the same name.
    Values without a matching attribute and nested sections are ignored.
    """
    for key in conf.scalars:
        if hasattr(target, key):
            setattr(target, key, conf[key])


class ClientSettings(CommonEqualityMixin, StringerMixin):
    """
    The settings used to build a client. Intervals and timeouts are in seconds.
    """

    def __init__(self, token=None, uri=None, connection_check_interval=15.0, pin_sync_interval=2.0,
                 tick=0.1, timeout=10.0, digital=(), virtual=()):
        self.token = token
        self.uri = uri or DEFAULT_URI
        self.connection_check_interval = connection_check_interval
        self.pin_sync_interval = pin_sync_interval
        self.tick = tick
        self.timeout = timeout
        self.digital = list(digital)
        self.virtual = list(virtual)


# the sections whose values are copied into ClientSettings
settings_sections = (
    ('blynk',),
    ('blynk', 'polling'),
    ('blynk', 'http'),
    ('blynk', 'pins'),
)


def load_settings(file=None, **kwargs) -> ClientSettings:
    """
    Loads the client settings from the configuration files.
    :param file: an optional local configuration file
    :param kwargs: passed to load_config
    """
    conf = load_config(file, **kwargs)
    settings = ClientSettings()
    for path in settings_sections:
        apply_conf_path(conf, path, settings)
    return settings
