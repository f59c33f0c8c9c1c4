"""Create initial tables

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19

"""
import sqlalchemy as sa
from alembic import op

# revision identifiers
revision = "001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Create users table
    op.create_table(
        "users",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("username", sa.String(30), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(128), nullable=False),
        sa.Column("display_name", sa.String(100), nullable=False),
        sa.Column("bio", sa.String(500), nullable=False, server_default=""),
        sa.Column("profile_picture", sa.String(2000), nullable=False, server_default=""),
        sa.Column("profile_picture_key", sa.String(512), nullable=False, server_default=""),
        sa.Column("cover_image", sa.String(2000), nullable=False, server_default=""),
        sa.Column("cover_image_key", sa.String(512), nullable=False, server_default=""),
        sa.Column("location", sa.String(200), nullable=False, server_default=""),
        sa.Column("website", sa.String(2000), nullable=False, server_default=""),
        sa.Column("occupation", sa.String(200), nullable=False, server_default=""),
        sa.Column("education", sa.String(200), nullable=False, server_default=""),
        sa.Column("skills", sa.JSON, nullable=False),
        sa.Column("social_links", sa.JSON, nullable=False),
        sa.Column("is_public", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    # Create artworks table
    op.create_table(
        "artworks",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("title", sa.String(100), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("image_url", sa.String(2000), nullable=False),
        sa.Column("image_key", sa.String(512), nullable=False),
        sa.Column(
            "artist_id",
            sa.String(36),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("category", sa.String(20), nullable=False, server_default="digital"),
        sa.Column("views", sa.Integer, nullable=False, server_default="0"),
        sa.Column("is_public", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("allow_comments", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("width", sa.Integer, nullable=False, server_default="0"),
        sa.Column("height", sa.Integer, nullable=False, server_default="0"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )

    # Create indexes for artworks
    op.create_index("ix_artworks_artist_created", "artworks", ["artist_id", "created_at"])
    op.create_index("ix_artworks_created_at", "artworks", ["created_at"])
    op.create_index("ix_artworks_views", "artworks", ["views"])
    op.create_index("ix_artworks_is_public", "artworks", ["is_public"])

    # Create artwork_tags table
    op.create_table(
        "artwork_tags",
        sa.Column(
            "artwork_id",
            sa.String(36),
            sa.ForeignKey("artworks.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("position", sa.Integer, primary_key=True),
        sa.Column("tag", sa.String(100), nullable=False),
    )
    op.create_index("ix_artwork_tags_tag", "artwork_tags", ["tag"])

    # Create artwork_likes table
    op.create_table(
        "artwork_likes",
        sa.Column(
            "artwork_id",
            sa.String(36),
            sa.ForeignKey("artworks.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "user_id",
            sa.String(36),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )

    # Create comments table
    op.create_table(
        "comments",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "artwork_id",
            sa.String(36),
            sa.ForeignKey("artworks.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "author_id",
            sa.String(36),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("text", sa.Text, nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index("ix_comments_artwork_id", "comments", ["artwork_id"])

    # Create comment_likes table
    op.create_table(
        "comment_likes",
        sa.Column(
            "comment_id",
            sa.String(36),
            sa.ForeignKey("comments.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "user_id",
            sa.String(36),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )


def downgrade() -> None:
    op.drop_table("comment_likes")
    op.drop_index("ix_comments_artwork_id", "comments")
    op.drop_table("comments")
    op.drop_table("artwork_likes")
    op.drop_index("ix_artwork_tags_tag", "artwork_tags")
    op.drop_table("artwork_tags")
    op.drop_index("ix_artworks_is_public", "artworks")
    op.drop_index("ix_artworks_views", "artworks")
    op.drop_index("ix_artworks_created_at", "artworks")
    op.drop_index("ix_artworks_artist_created", "artworks")
    op.drop_table("artworks")
    op.drop_index("ix_users_email", "users")
    op.drop_index("ix_users_username", "users")
    op.drop_table("users")
