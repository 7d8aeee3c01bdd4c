from terranav import create_app
from terranav.extensions import db
from terranav.models import Listing, ForumPost, User
from terranav.services.identity_service import issue_identity_token
from terranav.services.seed_service import (
    seed_categories,
    seed_forum_posts,
    seed_marketplace,
)

app = create_app()

with app.app_context():
    # Create initial categories
    categories = seed_categories()
    print(f"Categories ready: {', '.join(sorted(categories))}")

    # Create admin account (if not exists)
    admin_id = "admin"
    admin = db.session.get(User, admin_id)
    if not admin:
        admin = User(
            id=admin_id,
            email="admin@example.com",
            first_name="Site",
            last_name="Admin",
            is_admin=True,
            is_verified=True,
        )
        db.session.add(admin)
        db.session.commit()
        print(f"Created admin account: {admin_id}")

    # Demo content is only added to an empty marketplace
    if Listing.query.count() == 0:
        listings = seed_marketplace(admin.id)
        print(f"Created {len(listings)} sample listings")

    if ForumPost.query.count() == 0:
        posts = seed_forum_posts(admin.id)
        print(f"Created {len(posts)} forum posts")

    token = issue_identity_token({
        "sub": admin.id,
        "email": admin.email,
        "firstName": admin.first_name,
        "lastName": admin.last_name,
    })
    print("\nData initialization completed!")
    print("Admin bearer token (valid for IDENTITY_TOKEN_MAX_AGE seconds):")
    print(token)
