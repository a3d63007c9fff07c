from marshmallow import EXCLUDE, Schema, fields, validate, validates, post_load, ValidationError

from models.book import DEFAULT_IMAGE
from models.schemas.common import normalize_isbn, normalize_label_set
from models.schemas.review import ReviewOutSchema


def _not_blank(value):
    if not value or not value.strip():
        raise ValidationError("Must not be blank.")


class BookBaseSchema(Schema):
    id = fields.String(dump_only=True)
    title = fields.String(required=True, validate=[_not_blank, validate.Length(max=255)])
    author = fields.String(required=True, validate=[_not_blank, validate.Length(max=255)])
    description = fields.String(required=True)
    price = fields.Float(required=True, validate=validate.Range(min=0))
    image = fields.String(load_default=DEFAULT_IMAGE)
    isbn = fields.String(required=True)  # normalized in post_load
    genre = fields.List(fields.String(), load_default=list)
    tags = fields.List(fields.String(), load_default=list)
    date_published = fields.String(data_key="datePublished", allow_none=True)
    pages = fields.Integer(allow_none=True, strict=True)
    language = fields.String(allow_none=True)
    publisher = fields.String(allow_none=True)
    rating = fields.Float(load_default=0, validate=validate.Range(min=0, max=5))
    review_count = fields.Integer(data_key="reviewCount", load_default=0, strict=True)
    in_stock = fields.Boolean(data_key="inStock", load_default=True)
    featured = fields.Boolean(load_default=False)

    created_at = fields.DateTime(data_key="createdAt", dump_only=True)
    updated_at = fields.DateTime(data_key="updatedAt", dump_only=True)

    @validates("pages")
    def _validate_pages(self, value, **kwargs):
        if value is not None and value < 1:
            raise ValidationError("pages must be >= 1.")

    @validates("review_count")
    def _validate_review_count(self, value, **kwargs):
        if value is not None and value < 0:
            raise ValidationError("reviewCount must be >= 0.")

    @validates("isbn")
    def _validate_isbn(self, value, **kwargs):
        normalize_isbn(value)

    @post_load
    def _normalize(self, data, **kwargs):
        if "isbn" in data:
            data["isbn"] = normalize_isbn(data["isbn"])
        for key in ("title", "author"):
            if key in data:
                data[key] = data[key].strip()
        for key in ("genre", "tags"):
            if key in data:
                data[key] = normalize_label_set(data[key])
        return data


class BookCreateSchema(BookBaseSchema):
    pass


class BookUpdateSchema(BookBaseSchema):
    """Partial update: load with ``partial=True`` so nothing is required.

    Defaults are dropped so omitted fields are left untouched.
    """

    class Meta:
        # clients often send back the whole book, including read-only keys
        unknown = EXCLUDE

    image = fields.String()
    genre = fields.List(fields.String())
    tags = fields.List(fields.String())
    rating = fields.Float(validate=validate.Range(min=0, max=5))
    review_count = fields.Integer(data_key="reviewCount", strict=True)
    in_stock = fields.Boolean(data_key="inStock")
    featured = fields.Boolean()


class BookOutSchema(Schema):
    id = fields.String()
    title = fields.String()
    author = fields.String()
    description = fields.String()
    price = fields.Float()
    image = fields.String()
    isbn = fields.String()
    genre = fields.List(fields.String())
    tags = fields.List(fields.String())
    date_published = fields.String(data_key="datePublished", allow_none=True)
    pages = fields.Integer(allow_none=True)
    language = fields.String(allow_none=True)
    publisher = fields.String(allow_none=True)
    rating = fields.Float()
    review_count = fields.Integer(data_key="reviewCount")
    in_stock = fields.Boolean(data_key="inStock")
    featured = fields.Boolean()
    created_at = fields.DateTime(data_key="createdAt")
    updated_at = fields.DateTime(data_key="updatedAt")


class BookDetailSchema(BookOutSchema):
    reviews = fields.List(fields.Nested(ReviewOutSchema))
