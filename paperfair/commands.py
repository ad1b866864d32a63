import click
from flask import current_app
from flask.cli import with_appcontext

from .extensions import db
from .services import get_services

DEMO_AUTHORS = [
    ("zhang.san@university.edu", "Zhang San", "2021001"),
    ("li.si@university.edu", "Li Si", "2021002"),
    ("wang.wu@university.edu", "Wang Wu", "2021003"),
    ("zhao.liu@university.edu", "Zhao Liu", "2021004"),
    ("qian.qi@university.edu", "Qian Qi", "2021005"),
]

DEMO_SUBMISSIONS = [
    {
        "title": "Attention-Augmented U-Net for Medical Image Segmentation",
        "type": "PAPER",
        "co_authors": "Li Si, Wang Wu",
        "co_author_student_ids": "2021002,2021003",
        "keywords": "deep learning, medical imaging, segmentation, U-Net",
        "abstract": "An improved U-Net with attention and multi-scale feature fusion.",
    },
    {
        "title": "Real-Time Vehicle Detection and Tracking",
        "type": "POSTER",
        "keywords": "computer vision, intelligent transport, YOLO, tracking",
        "abstract": "A YOLO-based detector with multi-object tracking tuned for night and bad weather.",
    },
    {
        "title": "Blockchain-Backed Supply Chain Ledger",
        "type": "DEMO",
        "co_authors": "Zhao Liu",
        "co_author_student_ids": "2021004",
        "keywords": "blockchain, supply chain, smart contracts",
        "abstract": "A tamper-evident supply chain platform built on smart contracts.",
    },
    {
        "title": "Domain-Adaptive BERT for Chinese Sentiment Analysis",
        "type": "PAPER",
        "keywords": "NLP, sentiment analysis, BERT, domain adaptation",
        "abstract": "Evaluates BERT on Chinese sentiment datasets and adds domain adaptation.",
    },
    {
        "title": "Augmented Reality for K-12 Classrooms",
        "type": "POSTER",
        "co_authors": "Sun Ba",
        "co_author_student_ids": "2021006",
        "keywords": "augmented reality, education, interactive learning",
        "abstract": "An AR platform that visualizes abstract concepts across subjects.",
    },
]

# (voter index, submission index)
DEMO_VOTES = [(1, 0), (2, 0), (0, 1), (2, 1), (0, 2), (1, 2), (1, 3), (0, 4), (2, 4)]


@click.command("init-db")
@with_appcontext
def init_db_command():
    """Create all tables."""
    db.create_all()
    click.echo("Database tables created.")


@click.command("seed-demo")
@with_appcontext
def seed_demo_command():
    """Load sample authors, submissions and votes into an empty database."""
    services = get_services()

    existing = services.store.count_submissions()
    if existing > 0:
        click.echo(f"Found {existing} existing submissions. Skipping sample data creation.")
        return

    submissions = []
    for (email, name, student_id), extra in zip(DEMO_AUTHORS, DEMO_SUBMISSIONS):
        data = dict(extra, author_email=email, author_name=name, author_student_id=student_id)
        submissions.append(services.identity.create_submission(data))

    for voter_index, submission_index in DEMO_VOTES:
        _, name, student_id = DEMO_AUTHORS[voter_index]
        services.votes.cast_vote(submissions[submission_index].id, student_id, name)

    current_app.logger.info("Seeded demo data")
    click.echo(f"Created {len(submissions)} submissions and {len(DEMO_VOTES)} votes.")


def register_commands(app):
    app.cli.add_command(init_db_command)
    app.cli.add_command(seed_demo_command)
