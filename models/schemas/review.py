from marshmallow import Schema, fields, validate, post_load

from models.schemas.common import today_iso


class ReviewCreateSchema(Schema):
    user = fields.String(required=True, validate=validate.Length(min=1, max=255))
    rating = fields.Float(required=True, validate=validate.Range(min=0, max=5))
    title = fields.String(allow_none=True, validate=validate.Length(max=255))
    comment = fields.String(required=True, validate=validate.Length(min=1))
    date = fields.String(load_default=None)
    verified = fields.Boolean(load_default=False)

    @post_load
    def _default_date(self, data, **kwargs):
        if not data.get("date"):
            data["date"] = today_iso()
        return data


class ReviewOutSchema(Schema):
    id = fields.String()
    book_id = fields.String(data_key="bookId")
    user = fields.String()
    rating = fields.Float()
    title = fields.String(allow_none=True)
    comment = fields.String()
    date = fields.String()
    verified = fields.Boolean()
    created_at = fields.DateTime(data_key="createdAt")
