import json
import sys, pathlib
sys.path.append(str(pathlib.Path(__file__).resolve().parents[1] / "backend"))

from sqlalchemy import text
from clinic_booking.config import BASE_DIR
from clinic_booking.database import SessionLocal, engine
from clinic_booking.models.generated import Base, ClinicSettings

# Mon-Fri 08:00-20:00 with lunch, Saturday mornings, closed on Sunday
DEFAULT_OPERATING_HOURS = {
    "0": {"open": False},
    **{
        str(weekday): {"open": True, "start": "08:00", "end": "20:00", "lunchStart": "12:00", "lunchEnd": "13:00"}
        for weekday in range(1, 6)
    },
    "6": {"open": True, "start": "08:00", "end": "12:00"},
}


def main():
    (BASE_DIR / "data").mkdir(exist_ok=True)
    Base.metadata.create_all(engine)

    db = SessionLocal()
    try:
        print("DB OK:", db.execute(text("SELECT 1")).scalar())
        if not db.query(ClinicSettings).first():
            db.add(ClinicSettings(operating_hours=json.dumps(DEFAULT_OPERATING_HOURS)))
            db.commit()
            print("Default operating hours created")
    finally:
        db.close()


if __name__ == "__main__":
    main()
