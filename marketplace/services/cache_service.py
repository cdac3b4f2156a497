import json
from functools import wraps

import redis
from flask import current_app, g, request

# Expiry in seconds for collection and single-resource responses
LIST_TTL = 60
DETAIL_TTL = 300

EXTENSION_KEY = 'response_cache'


class ResponseCache:
    """Redis-backed store for serialized JSON response bodies.

    The cache is an optimization only. Every backend failure is logged and
    treated as a miss (reads) or a no-op (writes and invalidation), so the
    request always falls through to the database.
    """

    def __init__(self, app=None):
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        url = app.config.get('REDIS_URL')
        client = None
        if url:
            client = redis.Redis.from_url(
                url,
                decode_responses=True,
                socket_connect_timeout=1,
                socket_timeout=1,
            )
        app.extensions[EXTENSION_KEY] = client

    @property
    def client(self):
        return current_app.extensions.get(EXTENSION_KEY)

    @property
    def enabled(self):
        return self.client is not None

    def ping(self):
        if not self.enabled:
            return False
        try:
            return bool(self.client.ping())
        except redis.RedisError as e:
            current_app.logger.warning(f'Redis ping failed: {e}')
            return False

    def get(self, key):
        """Return the cached body stored under ``key`` or None"""
        if not self.enabled:
            return None
        try:
            raw = self.client.get(key)
            if raw is None:
                return None
            return json.loads(raw)
        except (redis.RedisError, ValueError) as e:
            current_app.logger.warning(f'Cache read failed for {key}: {e}')
            return None

    def set(self, key, body, ttl):
        if not self.enabled:
            return
        try:
            self.client.setex(key, ttl, json.dumps(body))
        except (redis.RedisError, TypeError, ValueError) as e:
            current_app.logger.warning(f'Cache write failed for {key}: {e}')

    def clear(self, pattern):
        """Delete every key matching the glob ``pattern``"""
        if not self.enabled:
            return 0
        try:
            keys = list(self.client.scan_iter(match=pattern, count=500))
            if keys:
                self.client.delete(*keys)
            return len(keys)
        except redis.RedisError as e:
            current_app.logger.warning(f'Cache clear failed for {pattern}: {e}')
            return 0


def get_cache():
    from marketplace import cache
    return cache


def request_cache_key(user_id=None):
    """Build the cache key for the current request path and query string"""
    path = request.path
    # Undecodable bytes stay distinct as \xNN escapes
    query_string = request.query_string.decode('utf-8', errors='backslashreplace')
    if query_string:
        path = f'{path}?{query_string}'
    if user_id is not None:
        return f'api:user:{user_id}:{path}'
    return f'api:{path}'


def properties_pattern():
    return 'api:/api/properties*'


def user_favorites_pattern(user_id='*'):
    return f'api:user:{user_id}:/api/favorites*'


def cached(ttl, per_user=False):
    """Serve a view from the response cache and store its successful results.

    The wrapped view returns a JSON-able dict, optionally with a status code.
    Only 2xx dict bodies are stored, and a body carrying ``noCache: true`` is
    never stored. ``per_user`` scopes the key to the authenticated principal.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            cache = get_cache()
            user_id = g.principal.user_id if per_user else None
            key = request_cache_key(user_id)

            hit = cache.get(key)
            if isinstance(hit, dict):
                return {**hit, 'source': 'cache'}, 200

            rv = fn(*args, **kwargs)
            body, status = (rv[0], rv[1]) if isinstance(rv, tuple) else (rv, 200)
            if isinstance(body, dict) and 200 <= status < 300 and body.get('noCache') is not True:
                cache.set(key, body, ttl)
            return rv
        return wrapper
    return decorator
