from unittest.mock import MagicMock, patch

import pytest

from matcha_watch.crawlers import ListingExtractor
from matcha_watch.errors import FetchError, SendError
from matcha_watch.scheduler.jobs import CheckerJob, build_dispatcher

LISTING_HTML = """
<div class="product"><h2>Maruyasu Matcha</h2><p>fine koicha powder</p></div>
<div class="product"><h2>Black Tea</h2><p>robust blend</p></div>
"""


@pytest.fixture
def listing_settings(make_settings):
    return make_settings(extraction_mode="listing", matcha_brands="maruyasu")


def _job(settings, html=LISTING_HTML, dispatcher=None):
    fetcher = MagicMock()
    fetcher.fetch.return_value = html
    dispatcher = dispatcher or MagicMock()
    job = CheckerJob(
        settings,
        fetcher=fetcher,
        extractor=ListingExtractor(settings.base_url),
        dispatcher=dispatcher,
    )
    return job, fetcher, dispatcher


class TestRunIteration:
    def test_dispatches_only_matching_products(self, listing_settings):
        job, fetcher, dispatcher = _job(listing_settings)
        dispatcher.dispatch.return_value = 1

        assert job.run_iteration() == 1

        fetcher.fetch.assert_called_once_with(listing_settings.products_url)
        sent = dispatcher.dispatch.call_args.args[0]
        assert [p.name for p in sent] == ["Maruyasu Matcha"]

    def test_no_matches_does_not_notify(self, listing_settings):
        html = '<div class="product"><h2>Black Tea</h2><p>robust blend</p></div>'
        job, _, dispatcher = _job(listing_settings, html=html)

        assert job.run_iteration() == 0
        dispatcher.dispatch.assert_not_called()

    def test_empty_listing_page_does_not_notify(self, listing_settings):
        job, _, dispatcher = _job(listing_settings, html="<html><body></body></html>")

        assert job.run_iteration() == 0
        dispatcher.dispatch.assert_not_called()

    def test_listing_fetch_error_propagates(self, listing_settings):
        job, fetcher, dispatcher = _job(listing_settings)
        fetcher.fetch.side_effect = FetchError(listing_settings.products_url, "HTTP 502")

        with pytest.raises(FetchError):
            job.run_iteration()
        dispatcher.dispatch.assert_not_called()

    def test_notify_error_propagates(self, listing_settings):
        dispatcher = MagicMock()
        dispatcher.dispatch.side_effect = SendError("SMTP relay rejected credentials")
        job, _, _ = _job(listing_settings, dispatcher=dispatcher)

        with pytest.raises(SendError, match="rejected credentials"):
            job.run_iteration()


class TestBuildDispatcher:
    def test_stateless_by_default(self, make_settings):
        dispatcher = build_dispatcher(make_settings())
        assert dispatcher.session is None

    @patch("matcha_watch.scheduler.jobs.get_session")
    def test_store_enabled(self, mock_get_session, make_settings):
        settings = make_settings(dedup_enabled=True, database_url="sqlite:///:memory:")

        dispatcher = build_dispatcher(settings)

        mock_get_session.assert_called_once_with("sqlite:///:memory:")
        assert dispatcher.session is mock_get_session.return_value
