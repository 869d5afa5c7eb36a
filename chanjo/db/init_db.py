"""Create tables and seed the reference vaccination schedule.

    python -m chanjo.db.init_db
"""
import logging

from chanjo import crud
from chanjo import models  # noqa: F401  registers tables on Base.metadata
from chanjo.db.base import Base
from chanjo.db.session import engine, get_db_session

logger = logging.getLogger(__name__)

# (age, vaccine, protection_against), in administration order
DEFAULT_SCHEDULE = [
    ("Birth", "BCG", "Tuberculosis"),
    ("Birth", "OPV 0", "Polio"),
    ("6 weeks", "OPV 1", "Polio"),
    ("6 weeks", "Pentavalent 1", "Diphtheria, Pertussis, Tetanus, Hepatitis B, Hib"),
    ("6 weeks", "PCV 1", "Pneumococcal disease"),
    ("6 weeks", "Rotavirus 1", "Rotavirus diarrhoea"),
    ("10 weeks", "OPV 2", "Polio"),
    ("10 weeks", "Pentavalent 2", "Diphtheria, Pertussis, Tetanus, Hepatitis B, Hib"),
    ("10 weeks", "PCV 2", "Pneumococcal disease"),
    ("10 weeks", "Rotavirus 2", "Rotavirus diarrhoea"),
    ("14 weeks", "OPV 3", "Polio"),
    ("14 weeks", "IPV", "Polio"),
    ("14 weeks", "Pentavalent 3", "Diphtheria, Pertussis, Tetanus, Hepatitis B, Hib"),
    ("14 weeks", "PCV 3", "Pneumococcal disease"),
    ("6 months", "Vitamin A", "Vitamin A deficiency"),
    ("6 months", "Malaria vaccine 1", "Malaria"),
    ("7 months", "Malaria vaccine 2", "Malaria"),
    ("9 months", "Measles-Rubella 1", "Measles, Rubella"),
    ("9 months", "Yellow Fever", "Yellow fever"),
    ("15–18 months", "Measles-Rubella 2", "Measles, Rubella"),
    ("2 years", "Malaria vaccine 4", "Malaria"),
]


def init_db() -> None:
    Base.metadata.create_all(bind=engine)
    with get_db_session() as db:
        added = crud.vaccination_schedule.seed(db, DEFAULT_SCHEDULE)
    logger.info(f"Database ready, {added} schedule entries added")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_db()
