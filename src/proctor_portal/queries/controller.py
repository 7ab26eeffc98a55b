from __future__ import annotations

from flask import Flask, jsonify

from ..common.serializers import query_json, response_json, user_ref_json
from ..common.web import AccessGuard, current_identity, json_body
from ..container import Container
from ..users.identity import ProctorIdentity, StudentIdentity


def register(app: Flask, container: Container) -> None:
    guard = AccessGuard(container.auth_service)
    service = container.query_service

    # Student
    @app.route("/api/student/queries", methods=["GET"], endpoint="student_queries")
    @guard.role_required(StudentIdentity)
    def student_queries():
        queries = service.list_for_student(current_identity())
        return jsonify({"queries": [query_json(q) for q in queries]})

    @app.route("/api/student/queries", methods=["POST"], endpoint="create_query")
    @guard.role_required(StudentIdentity)
    def create_query():
        data = json_body()
        query = service.create(current_identity(), subject=data.get("subject"), description=data.get("description"))
        return jsonify({"query": query_json(query)}), 201

    # Proctor
    @app.route("/api/proctor/queries", methods=["GET"], endpoint="proctor_queries")
    @guard.role_required(ProctorIdentity)
    def proctor_queries():
        rows = service.list_for_proctor(current_identity())
        return jsonify(
            {"queries": [{**query_json(r.query), "student": user_ref_json(r.student)} for r in rows]}
        )

    @app.route("/api/proctor/queries/<int:query_id>/respond", methods=["POST"], endpoint="proctor_respond")
    @guard.role_required(ProctorIdentity)
    def proctor_respond(query_id: int):
        response = service.proctor_respond(
            current_identity(), query_id=int(query_id), text=json_body().get("response")
        )
        return jsonify({"response": response_json(response)}), 201

    @app.route("/api/proctor/queries/<int:query_id>/status", methods=["PATCH"], endpoint="update_query_status")
    @guard.role_required(ProctorIdentity)
    def update_query_status(query_id: int):
        query = service.update_status(current_identity(), query_id=int(query_id), status=json_body().get("status"))
        return jsonify({"query": query_json(query)})

    # Either party
    @app.route("/api/queries/<int:query_id>", methods=["GET"], endpoint="query_detail")
    @guard.login_required
    def query_detail(query_id: int):
        detail = service.get_detail(current_identity(), query_id=int(query_id))
        return jsonify(
            {
                "query": query_json(detail.query),
                "student": user_ref_json(detail.student),
                "proctor": user_ref_json(detail.proctor),
                "responses": [
                    {**response_json(r.response), "user": user_ref_json(r.author, with_email=False, with_role=True)}
                    for r in detail.responses
                ],
            }
        )

    @app.route("/api/queries/<int:query_id>/respond", methods=["POST"], endpoint="query_respond")
    @guard.login_required
    def query_respond(query_id: int):
        response = service.respond(current_identity(), query_id=int(query_id), text=json_body().get("response"))
        return jsonify({"response": response_json(response)}), 201
