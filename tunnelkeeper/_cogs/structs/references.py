import dataclasses
import urllib.parse
from typing import Mapping, Optional


@dataclasses.dataclass(frozen=True)
class Resource:
    """
    A namespaced kind of objects in K8s API, as needed to build the URLs.

    The API group is empty for the core API (``/api/v1``); e.g., for pods.
    """
    group: str
    version: str
    plural: str
    kind: str

    @property
    def api_version(self) -> str:
        return f'{self.group}/{self.version}' if self.group else self.version

    def get_url(
            self,
            *,
            namespace: str,
            params: Optional[Mapping[str, str]] = None,
    ) -> str:
        """ The URL of the objects' list in a namespace, relative to the server. """
        root = f'/apis/{self.group}/{self.version}' if self.group else f'/api/{self.version}'
        path = f'{root}/namespaces/{namespace}/{self.plural}'
        return f'{path}?{urllib.parse.urlencode(params)}' if params else path


DEPLOYMENTS = Resource('apps', 'v1', 'deployments', 'Deployment')


def build_label_selector(labels: Mapping[str, str]) -> str:
    """ Render the equality-based label selector: ``key1=value1,key2=value2``. """
    return ','.join(f'{key}={value}' for key, value in labels.items())
