from flask import jsonify
from clinicsync.extensions import db
from clinicsync.models.record_models import DrugRecord
from clinicsync.utils.broadcaster import broadcaster
from .common import get_current_user, get_json_body


def add_drug():
    get_current_user()
    drug = DrugRecord.create(get_json_body())
    db.session.add(drug)
    db.session.commit()

    document = drug.to_dict()
    broadcaster.broadcast('new-drug', document)
    return jsonify(document), 201


def get_all_drugs():
    drugs = DrugRecord.query.order_by(DrugRecord.created_at, DrugRecord.id).all()
    return jsonify([d.to_dict() for d in drugs]), 200
