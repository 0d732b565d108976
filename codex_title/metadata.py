from typing import NamedTuple, Union

from eth_utils import keccak


class TitleMetadata(NamedTuple):
    name_hash: bytes
    description_hash: bytes
    image_hash: bytes


def _hash(value: Union[str, bytes]) -> bytes:
    if isinstance(value, str):
        return keccak(text=value)
    return keccak(primitive=value)


def hash_metadata(name, description, image) -> TitleMetadata:
    """Hash title metadata the way it is stored on chain.

    Text fields are hashed as UTF-8; `image` may be raw bytes or text.
    """
    if not name:
        raise ValueError("a title needs a name")
    return TitleMetadata(_hash(name), _hash(description), _hash(image))
