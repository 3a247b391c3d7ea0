from __future__ import annotations
import io
import logging
import zipfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence
import requests
from requests.adapters import HTTPAdapter
from requests.exceptions import RequestException
from urllib3.util import Retry
from ..errors import PatgenError, ResourceError
logger = logging.getLogger(__name__)

class ServiceRequestError(PatgenError):

    def __init__(self, status: int, detail: str) -> None:
        super().__init__(f'HTTP {status}: {detail}')
        self.status = status
        self.detail = detail

@dataclass
class GeneratedArchive:
    content: bytes
    project_name: str = ''
    project_path: str = ''
    files: List[str] = field(default_factory=list)

    def names(self) -> List[str]:
        with zipfile.ZipFile(io.BytesIO(self.content)) as zf:
            return zf.namelist()

    def extract_to(self, directory: Path) -> List[Path]:
        target = Path(directory)
        try:
            target.mkdir(parents=True, exist_ok=True)
            with zipfile.ZipFile(io.BytesIO(self.content)) as zf:
                zf.extractall(target)
                return [target / name for name in zf.namelist() if not name.endswith('/')]
        except (OSError, zipfile.BadZipFile) as exc:
            raise ResourceError(f'Cannot extract generated archive: {exc}', path=target) from exc

def _detail(resp: requests.Response) -> str:
    try:
        payload = resp.json()
    except ValueError:
        return resp.text.strip() or resp.reason or ''
    if isinstance(payload, dict) and 'detail' in payload:
        return str(payload['detail'])
    return str(payload)

class PatternServiceClient:

    def __init__(self, base_url: str, *, timeout: float=60.0, session: Optional[requests.Session]=None) -> None:
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or self._build_session()

    @staticmethod
    def _build_session() -> requests.Session:
        session = requests.Session()
        retry_cfg = Retry(total=3, connect=3, read=0, status=0, backoff_factor=0.5, allowed_methods=frozenset({'GET'}), raise_on_status=False)
        adapter = HTTPAdapter(max_retries=retry_cfg)
        session.mount('https://', adapter)
        session.mount('http://', adapter)
        return session

    def _request(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        url = f'{self.base_url}{path}'
        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except RequestException as exc:
            raise ResourceError(f'Request to {url} failed ({type(exc).__name__}): {exc}') from exc
        if not resp.ok:
            raise ServiceRequestError(resp.status_code, _detail(resp))
        return resp

    def health(self) -> Dict[str, Any]:
        return self._request('GET', '/health').json()

    def list_patterns(self) -> List[str]:
        payload = self._request('GET', '/api/patterns').json()
        return [str(item) for item in payload or []]

    def generate(self, refinements: Sequence[Sequence[str]], project_name: Optional[str]=None) -> GeneratedArchive:
        body: Dict[str, Any] = {'refinements': [list(layer) for layer in refinements]}
        if project_name:
            body['projectName'] = project_name
        resp = self._request('POST', '/api/generate', json=body)
        files_header = resp.headers.get('X-Generated-Files', '')
        archive = GeneratedArchive(content=resp.content, project_name=resp.headers.get('X-Project-Name', ''), project_path=resp.headers.get('X-Project-Path', ''), files=[f for f in files_header.split(';') if f])
        logger.info('Received %d bytes for project %s', len(archive.content), archive.project_name or '<unnamed>')
        return archive
