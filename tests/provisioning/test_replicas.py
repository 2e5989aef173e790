import pytest

from tunnelkeeper._cogs.structs.failures import ConfigurationError
from tunnelkeeper._core.actions.provisioning import check_image, check_image_pull_policy, \
                                                    parse_replicas


@pytest.mark.parametrize('value, expected', [
    ('0', 0),
    ('1', 1),
    ('3', 3),
    (' 3 ', 3),
    ('+3', 3),
    ('007', 7),
    ('2147483647', 2147483647),
])
def test_valid_replicas(value, expected):
    assert parse_replicas(value) == expected


@pytest.mark.parametrize('value', [None, '', '   '])
def test_missing_replicas(value):
    with pytest.raises(ConfigurationError) as err:
        parse_replicas(value)
    assert 'not configured' in str(err.value)


@pytest.mark.parametrize('value', ['abc', '-1', '1.5', '1e3', '1_000', '0x10', '३'])
def test_malformed_replicas(value):
    with pytest.raises(ConfigurationError) as err:
        parse_replicas(value)
    assert 'not a non-negative integer' in str(err.value)
    assert repr(value) in str(err.value)


def test_overflowing_replicas():
    with pytest.raises(ConfigurationError) as err:
        parse_replicas('2147483648')
    assert 'out of range' in str(err.value)


def test_image_is_required():
    with pytest.raises(ConfigurationError):
        check_image('')


def test_image_is_passed_through():
    assert check_image('cloudflare/cloudflared:latest') == 'cloudflare/cloudflared:latest'


@pytest.mark.parametrize('value', ['', 'Always', 'IfNotPresent', 'Never'])
def test_valid_pull_policies(value):
    assert check_image_pull_policy(value) == value


@pytest.mark.parametrize('value', ['always', 'Sometimes', ' Always'])
def test_invalid_pull_policies(value):
    with pytest.raises(ConfigurationError):
        check_image_pull_policy(value)
