import os
import shutil
import tempfile
import unittest
from unittest.mock import Mock

from configobj import ConfigObjError, ConfigObj
from hamcrest import assert_that, is_, equal_to, calling, raises, has_properties

from blynkconnector.api import DEFAULT_URI
from blynkconnector.config.config import config_filename, config_flavor, load_config_file_base, \
    load_config, map_os_name, fetch_conf_path, apply_conf_path, apply_conf, load_settings, ClientSettings, \
    config_name


class ConfigTestCase(unittest.TestCase):

    def setUp(self):
        self.home = tempfile.mkdtemp()
        self.local = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.home)
        shutil.rmtree(self.local)

    def write(self, directory, name, text):
        file = os.path.join(directory, name)
        with open(file, 'w') as f:
            f.write(text)
        return file

    def test_config_file_not_found(self):
        assert_that(calling(load_config_file_base).with_args('blah'), raises(IOError))

    def test_config_file_invalid_syntax(self):
        path = os.path.dirname(__file__)
        assert_that(calling(load_config_file_base).with_args(os.path.join(path, 'config_test_invalid_syntax.cfg')),
                    raises(ConfigObjError, "Section too nested at line 1. at .*config_test_invalid_syntax.cfg"))

    def test_config_file_invalid_value(self):
        file = self.write(self.local, 'local.cfg', "[blynk]\n[[polling]]\npin_sync_interval = fast\n")
        assert_that(calling(load_config).with_args(file, user_directory=self.home),
                    raises(ConfigObjError, "the config file .*local.cfg failed validation"))

    def test_config_value_out_of_range(self):
        file = self.write(self.local, 'local.cfg', "[blynk]\n[[polling]]\ntick = 0\n")
        assert_that(calling(load_settings).with_args(file, user_directory=self.home),
                    raises(ConfigObjError, "failed validation"))

    def test_can_retrieve_packaged_files(self):
        for flavor in ('default', 'schema'):
            file = config_filename(config_flavor(config_name, flavor))
            assert_that(os.path.exists(file), is_(True), "expected config path %s to exist" % file)

    def test_config_flavor(self):
        assert_that(config_flavor('blynk'), is_('blynk'))
        assert_that(config_flavor('blynk', 'osx'), is_('blynk.osx'))

    def test_default_settings(self):
        settings = load_settings(user_directory=self.home)
        assert_that(settings, has_properties(
            token='', uri=DEFAULT_URI, connection_check_interval=15.0, pin_sync_interval=2.0,
            tick=0.1, timeout=10.0, digital=[], virtual=[]))

    def test_default_config_is_typed(self):
        conf = load_config(user_directory=self.home)
        assert_that(conf['blynk']['polling']['connection_check_interval'], is_(15.0))
        assert_that(conf['blynk']['pins']['digital'], is_([]))

    def test_local_file_overrides_defaults(self):
        file = self.write(self.local, 'local.cfg', "\n".join([
            "[blynk]",
            "token = abc123",
            "    [[polling]]",
            "    pin_sync_interval = 0.5",
            "    [[pins]]",
            "    virtual = 5, 6",
        ]))
        settings = load_settings(file, user_directory=self.home)
        assert_that(settings, has_properties(
            token='abc123', pin_sync_interval=0.5, connection_check_interval=15.0, virtual=[5, 6], digital=[]))

    def test_user_file_overrides_defaults(self):
        self.write(self.home, 'blynk.cfg', "[blynk]\nuri = http://localhost:8080\n[[http]]\ntimeout = 3\n")
        settings = load_settings(user_directory=self.home)
        assert_that(settings.uri, is_('http://localhost:8080'))
        assert_that(settings.timeout, is_(3.0))

    def test_local_file_overrides_user_file(self):
        self.write(self.home, 'blynk.cfg', "[blynk]\ntoken = user\nuri = http://localhost:8080\n")
        file = self.write(self.local, 'local.cfg', "[blynk]\ntoken = local\n")
        settings = load_settings(file, user_directory=self.home)
        assert_that(settings.token, is_('local'))
        assert_that(settings.uri, is_('http://localhost:8080'))

    def test_missing_local_file(self):
        assert_that(calling(load_settings).with_args(os.path.join(self.local, 'absent.cfg'),
                                                     user_directory=self.home),
                    raises(IOError))

    def test_map_os_name(self):
        assert_that(map_os_name('Windows'), is_('windows'))
        assert_that(map_os_name('Darwin'), is_('osx'))
        assert_that(map_os_name('darwin'), is_('osx'))

    def test_non_existent_config_path(self):
        sut = ConfigObj()
        assert_that(fetch_conf_path(sut, ['abcd']), is_(None))

    def test_non_existent_apply_config_path(self):
        sut = ConfigObj()
        target = ClientSettings()
        apply_conf_path(sut, ['abcd'], target)
        assert_that(target, is_(equal_to(ClientSettings())))

    def test_apply_conf_sets_known_scalars_only(self):
        conf = ConfigObj({'token': 'abc', 'unknown': 'x', 'polling': {'tick': 1.0}})
        target = Mock(spec=['token', 'polling'])
        target.polling = 'untouched'
        apply_conf(conf, target)
        assert_that(target.token, is_('abc'))
        assert_that(target.polling, is_('untouched'))


if __name__ == '__main__':  # pragma no cover
    unittest.main()
