from app.kpidash import create_app

app = create_app()
