from datetime import date

from pydantic import BaseModel


class Conference(BaseModel):
    name: str
    full: str
    deadline: date
    start: date
    end: date
    color: str


CONFERENCES = [
    Conference(name="ICLR 2026", full="Learning Representations", deadline=date(2026, 1, 20), start=date(2026, 5, 4), end=date(2026, 5, 8), color="indigo"),
    Conference(name="AAAI 2026", full="Artificial Intelligence", deadline=date(2025, 8, 15), start=date(2026, 2, 5), end=date(2026, 2, 11), color="pink"),
    Conference(name="CVPR 2026", full="Computer Vision", deadline=date(2025, 11, 10), start=date(2026, 6, 14), end=date(2026, 6, 19), color="blue"),
    Conference(name="ICML 2026", full="Machine Learning", deadline=date(2026, 1, 28), start=date(2026, 7, 12), end=date(2026, 7, 18), color="emerald"),
    Conference(name="KCC 2026", full="Korea Computer Congress", deadline=date(2026, 4, 20), start=date(2026, 6, 24), end=date(2026, 6, 26), color="orange"),
]
