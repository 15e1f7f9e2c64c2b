import pandas as pd
import pytest

from gtd_charts.aggregate import aggregate


class FakeDocument:
    def __init__(self):
        self.callbacks = []

    def add_periodic_callback(self, callback, period):
        self.callbacks.append(callback)
        return callback

    def remove_periodic_callback(self, callback):
        self.callbacks.remove(callback)

    def tick(self):
        for callback in list(self.callbacks):
            callback()


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


@pytest.fixture
def fake_doc():
    return FakeDocument()


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def scenario_records():
    return [
        {"iyear": 2001, "country_txt": "A", "nkill": "5", "attacktype1_txt": "Bombing", "targtype1_txt": "Military"},
        {"iyear": 2001, "country_txt": "B", "nkill": "3", "attacktype1_txt": "Bombing", "targtype1_txt": "Civilian"},
        {"iyear": 2002, "country_txt": "A", "nkill": "2", "attacktype1_txt": "Kidnapping", "targtype1_txt": "Civilian"},
    ]


@pytest.fixture
def chart_data(scenario_records):
    return aggregate(scenario_records)


@pytest.fixture
def yearly():
    return pd.DataFrame({"year": [1990, 1991, 1992, 1993, 1994], "count": [4, 9, 2, 7, 5]})


@pytest.fixture
def totals():
    return pd.DataFrame(
        {
            "country": ["Iraq", "Afghanistan", "Pakistan", "Nigeria", "India"],
            "total": [97.0, 60.0, 45.0, 30.0, 12.0],
        }
    )


@pytest.fixture
def csv_path(tmp_path):
    path = tmp_path / "incidents.csv"
    path.write_text(
        "eventid,iyear,country_txt,nkill,attacktype1_txt,targtype1_txt\n"
        "1,2001,A,5,Bombing,Military\n"
        "2,2001,B,3,Bombing,Civilian\n"
        "3,2002,A,2,Kidnapping,Civilian\n"
        "4,2003,,1,Armed Assault,\n",
        encoding="latin1",
    )
    return path
