import pytest

from tunnelkeeper._cogs.structs.references import DEPLOYMENTS, Resource, build_label_selector


def test_deployments_resource():
    assert DEPLOYMENTS.api_version == 'apps/v1'
    assert DEPLOYMENTS.kind == 'Deployment'


def test_core_api_version():
    assert Resource('', 'v1', 'pods', 'Pod').api_version == 'v1'


@pytest.mark.parametrize('kwargs, expected', [
    (dict(namespace='ns'), '/apis/apps/v1/namespaces/ns/deployments'),
    (dict(namespace='ns', params={}), '/apis/apps/v1/namespaces/ns/deployments'),
    (dict(namespace='ns', params={'labelSelector': 'a=b'}),
     '/apis/apps/v1/namespaces/ns/deployments?labelSelector=a%3Db'),
])
def test_urls_of_grouped_resources(kwargs, expected):
    assert DEPLOYMENTS.get_url(**kwargs) == expected


def test_urls_of_core_resources():
    resource = Resource('', 'v1', 'configmaps', 'ConfigMap')
    assert resource.get_url(namespace='ns') == '/api/v1/namespaces/ns/configmaps'


@pytest.mark.parametrize('labels, expected', [
    ({}, ''),
    ({'a': 'b'}, 'a=b'),
    ({'a.dev/b': 'c', 'x': 'y'}, 'a.dev/b=c,x=y'),
])
def test_label_selectors(labels, expected):
    assert build_label_selector(labels) == expected
