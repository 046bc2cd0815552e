import io

import main as app
from fakes import FakeFetcher, FakeLister
from models import Tier
from services.names import NameResolver
from services.pipeline_cache import PipelineCache
from services.rates import RateComputer


def make_pipeline():
    fetcher = FakeFetcher()
    urls = fetcher.urls
    fetcher.docs = {
        urls.table("tier-0", "a.ron"): '[(1.0, Item("x")), (1.0, Nothing)]',
        urls.item("x"): '(name: "Iron Sword")',
    }
    lister = FakeLister({urls.tier_listing("tier-0"): ["a.ron"]})
    pipeline = PipelineCache(lister, RateComputer(NameResolver(fetcher), fetcher), urls)
    pipeline.start_prefetch([Tier("tier-0", "T1"), Tier("tier-1", "T2")])
    return pipeline, fetcher


def test_session_answers_until_eof():
    pipeline, fetcher = make_pipeline()
    out = io.StringIO()
    app.run_session(pipeline, io.StringIO("T1\nbogus\nT1\n"), out)
    pipeline.close()
    text = out.getvalue()
    assert text.count("\nT1, T2: ") == 4
    assert text.count("Iron Sword") == 2
    assert text.count("time: ") == 3
    assert fetcher.count("https://raw.test/") == 1


def test_build_pipeline_from_defaults(tmp_path):
    cm = app.ConfigManager(config_path=str(tmp_path / "none.yaml"))
    cm.load_config()
    pipeline = app.build_pipeline(cm)
    try:
        assert pipeline.keys() == []
        assert pipeline.table_filter.selector == 'a[title$=".ron"]'
    finally:
        pipeline.close()
