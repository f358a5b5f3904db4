"""Query state for a single API resource.

    query = ResourceQuery(client.list_customers, search='', status='all')
    query.fetch()
    query.set_params(search='smith')   # refetches
    if query.status == ResourceQuery.ERROR:
        show(query.error, query.data)  # data is the last good result

States move idle -> loading -> success | error. Every fetch takes a new
generation number; a result that arrives after a newer fetch has started
is dropped. No caching or de-duplication happens here.
"""
import logging
import threading

from .api_client import ApiError

logger = logging.getLogger('dealerdesk.client.query')


class ResourceQuery:

    IDLE = 'idle'
    LOADING = 'loading'
    SUCCESS = 'success'
    ERROR = 'error'

    def __init__(self, fetcher, **params):
        self._fetcher = fetcher
        self.params = dict(params)
        self.status = self.IDLE
        self.data = None
        self.error = None
        self._generation = 0
        self._lock = threading.Lock()

    @property
    def is_loading(self):
        return self.status == self.LOADING

    def _begin(self):
        with self._lock:
            self._generation += 1
            self.status = self.LOADING
            return self._generation, dict(self.params)

    def _settle(self, generation, data=None, error=None):
        with self._lock:
            if generation != self._generation:
                logger.debug(f'Dropping superseded result (generation {generation})')
                return False
            if error is None:
                self.data = data
                self.error = None
                self.status = self.SUCCESS
            else:
                self.error = error
                self.status = self.ERROR
            return True

    def fetch(self):
        """Run the fetcher with the current params and return the data.

        ApiError settles into the error state. Any other exception also
        settles into the error state and is then re-raised.
        """
        generation, params = self._begin()
        try:
            data = self._fetcher(**params)
        except ApiError as e:
            self._settle(generation, error=e.message)
        except Exception as e:
            self._settle(generation, error=str(e) or type(e).__name__)
            raise
        else:
            self._settle(generation, data=data)
        return self.data

    refetch = fetch

    def set_params(self, **params):
        """Update query params and refetch."""
        with self._lock:
            self.params.update(params)
        return self.fetch()
