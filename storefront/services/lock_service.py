# storefront/services/lock_service.py
import uuid
from contextlib import contextmanager

import redis

from storefront.domain.errors import CheckoutInProgress, LockUnavailable
from storefront.utils.logging import get_logger
from storefront.utils.retry import poll_until_true, redis_retry
from storefront.utils.settings import CHECKOUT_LOCK_TTL_SECONDS, CHECKOUT_LOCK_WAIT_SECONDS, REDIS_URL

logger = get_logger(__name__)

#LUA porownaj i usun, atomowo
#nie mozna wcisnac sie miedzy GET a DEL, wiec nie zwolnimy cudzego locka po wygasnieciu naszego
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""


class LockService:
    """
    -blokada koszyka (checkout i kazda zmiana pozycji, jeden zapis na raz)
    -zwalnianie locka tylko przez wlasciciela tokenu
    -TTL zeby padniety proces nie zablokowal koszyka na zawsze
    """

    def __init__(self, url: str | None = None, client: redis.Redis | None = None):
        self.redis = client or redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )

    @staticmethod
    def _key(cart_id: int) -> str:
        return f"cart:{cart_id}:checkout"

    @redis_retry()
    def _try_set(self, key: str, token: str, ttl: int) -> bool:
        #SET cart:1:checkout "<token>" NX EX 30
        return bool(self.redis.set(name=key, value=token, nx=True, ex=ttl))

    @redis_retry()
    def _compare_and_delete(self, key: str, token: str) -> bool:
        return bool(self.redis.eval(_RELEASE_LUA, 1, key, token))

    def acquire_checkout_lock(
        self,
        cart_id: int,
        ttl: int = CHECKOUT_LOCK_TTL_SECONDS,
        wait: float = CHECKOUT_LOCK_WAIT_SECONDS,
    ) -> str | None:
        """Zwraca token locka albo None jesli nie udalo sie w czasie `wait`."""
        key = self._key(cart_id)
        token = uuid.uuid4().hex
        logger.info(f"Acquire lock {key}")

        try:
            acquired = poll_until_true(wait)(self._try_set, key, token, ttl)
        except redis.RedisError as e:
            logger.error(f"Redis unavailable while acquiring {key}: {e}", extra={"cart_id": cart_id})
            raise LockUnavailable() from e

        if not acquired:
            logger.warning(f"Timed out waiting for lock {key}")
            return None
        return token

    def release_checkout_lock(self, cart_id: int, token: str) -> bool:
        key = self._key(cart_id)
        logger.info(f"Release lock {key}")
        try:
            return self._compare_and_delete(key, token)
        except redis.RedisError as e:
            # zapis juz jest w bazie, lock wygasnie sam po TTL
            logger.warning(f"Could not release {key}, it will expire after TTL: {e}", extra={"cart_id": cart_id})
            return False


@contextmanager
def cart_lock(locks, cart_id: int, wait: float = CHECKOUT_LOCK_WAIT_SECONDS):
    """Trzyma lock koszyka na czas bloku; brak locka w czasie `wait` -> CheckoutInProgress."""
    token = locks.acquire_checkout_lock(cart_id, wait=wait)
    if token is None:
        raise CheckoutInProgress()
    try:
        yield token
    finally:
        locks.release_checkout_lock(cart_id, token)
