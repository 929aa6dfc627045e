"""
Secure storage for sensitive strings such as session tokens.

Each host supplies its own backend; the session manager only relies on the
SecureStorage protocol.
"""

import base64
import json
import os
import secrets
import threading
from pathlib import Path
from typing import Dict, Optional, Protocol, Union, runtime_checkable

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from services.errors import SecureStorageError
from utils.logging_config import get_logger


@runtime_checkable
class SecureStorage(Protocol):
    """Key/value store for secrets"""

    def save_string(self, key: str, value: str) -> None:
        ...

    def get_string(self, key: str) -> Optional[str]:
        ...

    def remove(self, key: str) -> None:
        ...

    def clear(self) -> None:
        ...


class InMemorySecureStorage:
    """Process-local storage; contents are lost on restart"""

    def __init__(self):
        self._values: Dict[str, str] = {}
        self._lock = threading.Lock()

    def save_string(self, key: str, value: str) -> None:
        with self._lock:
            self._values[key] = value

    def get_string(self, key: str) -> Optional[str]:
        with self._lock:
            return self._values.get(key)

    def remove(self, key: str) -> None:
        with self._lock:
            self._values.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._values.clear()


class EncryptedFileSecureStorage:
    """
    File-backed storage encrypting every value with AES-256-GCM.

    A master key is generated on first use and kept next to the data file.
    Values that fail to decrypt are reported as missing.
    """

    NONCE_SIZE = 12
    KEY_FILE = "master.key"
    DATA_FILE = "secure.json"

    def __init__(self, storage_dir: Union[str, Path]):
        self.logger = get_logger(__name__)
        self.storage_dir = Path(storage_dir)
        self.key_file = self.storage_dir / self.KEY_FILE
        self.data_file = self.storage_dir / self.DATA_FILE
        self._lock = threading.Lock()

        try:
            self.storage_dir.mkdir(parents=True, exist_ok=True)
            self._aesgcm = AESGCM(self._load_or_create_key())
            self._values = self._load_values()
        except OSError as e:
            raise SecureStorageError(f"Cannot open secure storage at {self.storage_dir}: {e}") from e

    def save_string(self, key: str, value: str) -> None:
        with self._lock:
            self._values[key] = self._encrypt(value, key)
            self._flush()

    def get_string(self, key: str) -> Optional[str]:
        with self._lock:
            encrypted = self._values.get(key)
        if encrypted is None:
            return None

        try:
            return self._decrypt(encrypted, key)
        except (InvalidTag, ValueError) as e:
            self.logger.warning(f"Error decrypting value for key '{key}': {type(e).__name__}")
            return None

    def remove(self, key: str) -> None:
        with self._lock:
            if self._values.pop(key, None) is not None:
                self._flush()

    def clear(self) -> None:
        with self._lock:
            self._values.clear()
            self._flush()

    def _load_or_create_key(self) -> bytes:
        if self.key_file.exists():
            key = self.key_file.read_bytes()
            if len(key) != 32:
                raise SecureStorageError(f"Master key at {self.key_file} is not a 256-bit key")
            return key

        key = secrets.token_bytes(32)
        self.key_file.write_bytes(key)
        try:
            os.chmod(self.key_file, 0o600)
        except OSError:
            self.logger.debug("Could not restrict master key permissions")
        return key

    def _load_values(self) -> Dict[str, str]:
        if not self.data_file.exists():
            return {}
        try:
            data = json.loads(self.data_file.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise SecureStorageError(f"Secure storage file is corrupt: {e}") from e
        if not isinstance(data, dict):
            raise SecureStorageError("Secure storage file is corrupt: expected an object")
        return {str(k): str(v) for k, v in data.items()}

    def _flush(self) -> None:
        tmp_path = self.data_file.with_suffix(".tmp")
        try:
            tmp_path.write_text(json.dumps(self._values, indent=2), encoding="utf-8")
            os.replace(tmp_path, self.data_file)
        except OSError as e:
            raise SecureStorageError(f"Cannot write secure storage: {e}") from e

    def _encrypt(self, plain_text: str, key: str) -> str:
        nonce = secrets.token_bytes(self.NONCE_SIZE)
        cipher_text = self._aesgcm.encrypt(nonce, plain_text.encode("utf-8"), key.encode("utf-8"))
        return base64.b64encode(nonce + cipher_text).decode("ascii")

    def _decrypt(self, encrypted: str, key: str) -> str:
        combined = base64.b64decode(encrypted.encode("ascii"), validate=True)
        nonce, cipher_text = combined[:self.NONCE_SIZE], combined[self.NONCE_SIZE:]
        return self._aesgcm.decrypt(nonce, cipher_text, key.encode("utf-8")).decode("utf-8")
