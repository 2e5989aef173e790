import dataclasses

import pytest

from tunnelkeeper._cogs.structs.failures import ConfigurationError
from tunnelkeeper._cogs.structs.trustpools import DEFAULT_KEY, DEFAULT_MOUNT_PATH, \
                                                  ConfigMapTrustPool, SecretTrustPool, \
                                                  resolve_trust_pool


@pytest.mark.parametrize('config_map, secret', [
    (None, None),
    ('', None),
    (None, ''),
    ('', ''),
])
@pytest.mark.parametrize('key, mount_path', [
    (None, None),
    ('tls.crt', '/etc/custom'),
])
def test_nothing_is_resolved_without_names(config_map, secret, key, mount_path):
    trust_pool = resolve_trust_pool(config_map=config_map, secret=secret,
                                    key=key, mount_path=mount_path)
    assert trust_pool is None


@pytest.mark.parametrize('key, mount_path', [
    (None, None),
    ('', ''),
    ('tls.crt', None),
    (None, '/etc/custom'),
    ('tls.crt', '/etc/custom'),
])
def test_both_names_are_rejected(key, mount_path):
    with pytest.raises(ConfigurationError) as err:
        resolve_trust_pool(config_map='cm', secret='sec', key=key, mount_path=mount_path)
    assert '--capool-config-map' in str(err.value)
    assert '--capool-secret' in str(err.value)


def test_config_map_with_defaults():
    trust_pool = resolve_trust_pool(config_map='ca-bundle')
    assert isinstance(trust_pool, ConfigMapTrustPool)
    assert trust_pool.name == 'ca-bundle'
    assert trust_pool.key == 'ca-certificates.crt'
    assert trust_pool.mount_path == '/etc/ssl/certs'


def test_secret_with_defaults():
    trust_pool = resolve_trust_pool(secret='ca-secret')
    assert isinstance(trust_pool, SecretTrustPool)
    assert trust_pool.name == 'ca-secret'
    assert trust_pool.key == DEFAULT_KEY
    assert trust_pool.mount_path == DEFAULT_MOUNT_PATH


@pytest.mark.parametrize('kwargs, cls', [
    (dict(config_map='x'), ConfigMapTrustPool),
    (dict(config_map='x', secret=''), ConfigMapTrustPool),
    (dict(secret='x'), SecretTrustPool),
    (dict(config_map='', secret='x'), SecretTrustPool),
])
def test_explicit_key_and_mount_path(kwargs, cls):
    trust_pool = resolve_trust_pool(key='tls.crt', mount_path='/etc/custom', **kwargs)
    assert type(trust_pool) is cls
    assert trust_pool.name == 'x'
    assert trust_pool.key == 'tls.crt'
    assert trust_pool.mount_path == '/etc/custom'


def test_empty_key_and_mount_path_are_defaulted():
    trust_pool = resolve_trust_pool(config_map='x', key='', mount_path='')
    assert trust_pool == ConfigMapTrustPool(name='x')


@pytest.mark.parametrize('cls', [ConfigMapTrustPool, SecretTrustPool])
def test_trust_pools_are_immutable(cls):
    trust_pool = cls(name='x')
    with pytest.raises(dataclasses.FrozenInstanceError):
        trust_pool.name = 'y'


def test_config_map_volume_source():
    trust_pool = ConfigMapTrustPool(name='ca-bundle')
    assert trust_pool.as_volume_source() == {'configMap': {'name': 'ca-bundle'}}


def test_secret_volume_source():
    trust_pool = SecretTrustPool(name='ca-secret')
    assert trust_pool.as_volume_source() == {'secret': {'secretName': 'ca-secret'}}
