"""Demo data for local development.

Usage:
    python -m clubsphere.seed
"""
import logging

from clubsphere.auth.passwords import hash_password
from clubsphere.storage.base import Storage
from clubsphere.storage.records import (
    ClubCategory,
    MembershipRole,
    NewAnnouncement,
    NewClub,
    NewMembership,
    NewUser,
    UserRole,
)

logger = logging.getLogger(__name__)

DEMO_USERS = [
    ('admin', 'admin@school.clubsphere', 'School Administrator', 'ADMIN001', UserRole.admin),
    ('mdleader', 'md.jyaulh@school.clubsphere', 'Mike Johnson', 'STU001', UserRole.leader),
    ('letsupgrade', 'letsupgrade@school.clubsphere', 'Sarah Chen', 'STU002', UserRole.leader),
    ('ajaytudent', 'alay.kumar@school.clubsphere', 'Ajay Kumar', 'STU003', UserRole.student),
    ('shashi208', 'shashi028@school.clubsphere', 'Shashi Singh', 'STU004', UserRole.student),
    ('hasnainjh', 'hasnainjh@school.clubsphere', 'Md Hasnain', 'STU005', UserRole.student),
]

# (name, description, category, leader username, meeting time, meeting location)
DEMO_CLUBS = [
    (
        'Programming Club',
        'Learn coding, build projects, and participate in hackathons. Welcome to students of all skill levels!',
        ClubCategory.technology,
        'mdleader',
        'Fridays 4:00 PM',
        'Computer Lab 201',
    ),
    (
        'Art Society',
        'Express your creativity through various art forms including painting, sculpture, and digital art.',
        ClubCategory.arts,
        'letsupgrade',
        'Wednesdays 3:30 PM',
        'Art Studio B',
    ),
    (
        'Debate Club',
        'Develop public speaking skills and engage in thoughtful discussions on current events.',
        ClubCategory.academic,
        'mdleader',
        'Tuesdays 4:15 PM',
        'Room 105',
    ),
    (
        'Soccer Team',
        'Competitive soccer team representing our school. Join us for practices and matches!',
        ClubCategory.sports,
        'letsupgrade',
        'Monday & Thursday 5:00 PM',
        'Soccer Field',
    ),
    (
        'Community Volunteers',
        'Make a difference in our community through service projects and volunteer work.',
        ClubCategory.service,
        'mdleader',
        'Saturdays 10:00 AM',
        'Student Center',
    ),
]

DEMO_MEMBERSHIPS = [
    ('ajaytudent', 'Programming Club', MembershipRole.member),
    ('ajaytudent', 'Debate Club', MembershipRole.member),
    ('shashi208', 'Art Society', MembershipRole.member),
    ('shashi208', 'Programming Club', MembershipRole.member),
    ('hasnainjh', 'Soccer Team', MembershipRole.member),
    ('hasnainjh', 'Community Volunteers', MembershipRole.member),
    ('ajaytudent', 'Community Volunteers', MembershipRole.officer),
]

# (club name, author username, title, content)
DEMO_ANNOUNCEMENTS = [
    (
        'Programming Club',
        'mdleader',
        'Hackathon Registration Open!',
        'Our annual hackathon is coming up next month. Registration is now open for all skill levels. '
        'Prizes include $500 gift cards and internship opportunities!',
    ),
    (
        'Debate Club',
        'mdleader',
        'Weekly Meeting Canceled',
        "This week's meeting is canceled due to the school holiday. "
        "We'll resume next week with our planned debate on climate policy.",
    ),
    (
        'Art Society',
        'letsupgrade',
        'Art Exhibition Next Friday',
        'Come display your artwork at our monthly exhibition! Setup starts at 2 PM in the main hallway. '
        'Refreshments will be provided.',
    ),
    (
        'Soccer Team',
        'letsupgrade',
        'Soccer Practice Schedule Update',
        "Due to field maintenance, Tuesday's practice is moved to Wednesday at 5 PM. "
        'Thursday practice remains the same.',
    ),
    (
        'Community Volunteers',
        'mdleader',
        'Food Drive This Weekend',
        'Join us for our monthly food drive at the local food bank. We meet at the student center at 10 AM. '
        'Volunteer hours will be provided!',
    ),
]


def seed_demo_data(storage: Storage, password: str) -> bool:
    """Load the demo school into storage. Returns False when it is already there."""
    if storage.get_user_by_username(DEMO_USERS[0][0]) is not None:
        logger.info('Demo data already present, skipping seed')
        return False

    password_hash = hash_password(password)
    users = {}
    for username, email, full_name, school_id, role in DEMO_USERS:
        users[username] = storage.create_user(
            NewUser(
                username=username,
                password=password_hash,
                email=email,
                full_name=full_name,
                school_id=school_id,
                role=role,
            )
        )

    clubs = {}
    for name, description, category, leader, meeting_time, meeting_location in DEMO_CLUBS:
        clubs[name] = storage.create_club_with_leader(
            NewClub(
                name=name,
                description=description,
                category=category,
                meeting_time=meeting_time,
                meeting_location=meeting_location,
            ),
            leader_id=users[leader].id,
        )

    for username, club_name, role in DEMO_MEMBERSHIPS:
        storage.create_membership(
            NewMembership(user_id=users[username].id, club_id=clubs[club_name].id, role=role)
        )

    for club_name, author, title, content in DEMO_ANNOUNCEMENTS:
        storage.create_announcement(
            NewAnnouncement(
                title=title,
                content=content,
                club_id=clubs[club_name].id,
                author_id=users[author].id,
            )
        )

    logger.info(
        'Seeded %d users, %d clubs and %d announcements',
        len(users),
        len(clubs),
        len(DEMO_ANNOUNCEMENTS),
    )
    return True


def main() -> None:
    from clubsphere.core import config
    from clubsphere.main import build_storage

    logging.basicConfig(level=logging.INFO)
    if config.STORAGE_BACKEND == 'memory':
        logger.warning('STORAGE_BACKEND is memory; seeded data will be gone when this process exits')
    seed_demo_data(build_storage(), config.DEMO_PASSWORD)


if __name__ == '__main__':
    main()
