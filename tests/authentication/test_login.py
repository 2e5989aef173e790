from unittest.mock import Mock

import pytest

from tunnelkeeper._cogs.structs.credentials import ConnectionInfo, LoginError
from tunnelkeeper._core.intents.piggybacking import login


def test_nothing_is_available(logger):
    fn1 = Mock(return_value=None)
    fn2 = Mock(return_value=None)
    with pytest.raises(LoginError):
        login(logger=logger, login_fns=[fn1, fn2])
    assert fn1.call_count == 1
    assert fn2.call_count == 1


def test_only_one_is_available(logger):
    info = ConnectionInfo(server='https://second/')
    result = login(logger=logger, login_fns=[Mock(return_value=None), Mock(return_value=info)])
    assert result is info


def test_highest_priority_wins(logger):
    info1 = ConnectionInfo(server='https://first/', priority=10)
    info2 = ConnectionInfo(server='https://second/', priority=20)
    result = login(logger=logger, login_fns=[Mock(return_value=info1), Mock(return_value=info2)])
    assert result is info2


def test_logger_is_passed_to_the_login_functions(logger):
    fn = Mock(return_value=ConnectionInfo(server='https://any/'))
    login(logger=logger, login_fns=[fn])
    assert fn.call_args_list[0][1] == {'logger': logger}


def test_errors_are_escalated(logger):
    fn1 = Mock(side_effect=LoginError("boo!"))
    fn2 = Mock(return_value=ConnectionInfo(server='https://any/'))
    with pytest.raises(LoginError, match="boo!"):
        login(logger=logger, login_fns=[fn1, fn2])
    assert fn2.call_count == 0
