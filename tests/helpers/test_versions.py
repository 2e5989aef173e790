import importlib
import importlib.metadata

import pytest

from tunnelkeeper._cogs.helpers import versions


@pytest.fixture(autouse=True)
def _restore_the_version():
    yield
    importlib.reload(versions)


def test_version_of_an_installed_package(mocker):
    version_mock = mocker.patch('importlib.metadata.version', return_value='1.2.3')
    importlib.reload(versions)
    assert versions.version == '1.2.3'
    assert version_mock.call_args_list[0][0][0] == 'tunnelkeeper'


def test_version_of_a_source_tree(mocker):
    error = importlib.metadata.PackageNotFoundError('tunnelkeeper')
    mocker.patch('importlib.metadata.version', side_effect=error)
    importlib.reload(versions)
    assert versions.version is None
