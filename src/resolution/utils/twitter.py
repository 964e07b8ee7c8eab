from eth_account import Account
from eth_account.messages import encode_defunct
from eth_keys.exceptions import BadSignature
from eth_utils import keccak

from resolution.utils.standard_keys import TWITTER_USERNAME

TWITTER_VERIFICATION_ADDRESS = "0x12cfb13522F13a78b650a8bCbFCf50b7CB899d82"


def twitter_verification_message(token_id: str, owner: str, twitter_handle: str) -> str:
    """Message the verification service signs for a twitter handle"""
    token_id_decimal = str(int(token_id, 16))
    parts = [token_id_decimal, owner, TWITTER_USERNAME, twitter_handle]
    return "".join("0x" + keccak(text=part).hex() for part in parts)


def is_valid_twitter_signature(
    token_id: str,
    owner: str,
    twitter_handle: str,
    validation_signature: str,
    verifier: str = TWITTER_VERIFICATION_ADDRESS,
) -> bool:
    """
    Check that the twitter handle record was signed by the verifier.

    Args:
        token_id: Namehash of the domain (hex)
        owner: Current owner of the domain
        twitter_handle: Value of the social.twitter.username record
        validation_signature: Value of the validation record
        verifier: Address expected to have produced the signature

    Returns:
        bool: True if the recovered signer is the verifier
    """
    message = encode_defunct(
        text=twitter_verification_message(token_id, owner, twitter_handle)
    )
    try:
        signer = Account.recover_message(message, signature=validation_signature)
    except (ValueError, BadSignature):
        return False
    return signer.lower() == verifier.lower()
