"""Routes for the tasks blueprint."""

from firebase_admin import firestore
from flask import g, jsonify

from deskhive.auth.decorators import login_required
from deskhive.core.forms import validate_form
from deskhive.core.responses import workflow_response

from . import bp
from .forms import TaskForm, TaskStatusForm
from .services import TaskService


@bp.route("/mine", methods=["GET"])
@login_required
def my_tasks():
    """List the signed-in user's tasks across all communities."""
    db = firestore.client()
    tasks = TaskService.fetch_mine(db, g.user["uid"])
    return jsonify({"tasks": tasks, "summary": TaskService.summarize(tasks)})


@bp.route("/community/<string:community_id>", methods=["GET"])
@login_required
def community_tasks(community_id):
    """List a community's tasks."""
    db = firestore.client()
    tasks = TaskService.list_for_community(db, community_id)
    return jsonify({"tasks": tasks, "summary": TaskService.summarize(tasks)})


@bp.route("/community/<string:community_id>", methods=["POST"])
@login_required(lead_required=True)
def create_task(community_id):
    """Assign a task to a community member."""
    form = validate_form(TaskForm())
    db = firestore.client()
    result = TaskService.create_task(
        db,
        community_id,
        g.user,
        form.assignee_id.data,
        form.title.data,
        form.description.data,
        form.priority.data,
        form.due_date.data,
    )
    return workflow_response(result, success_code=201)


@bp.route("/community/<string:community_id>/<string:task_id>/status", methods=["POST"])
@login_required
def update_status(community_id, task_id):
    """Move a task to a new status."""
    form = validate_form(TaskStatusForm())
    db = firestore.client()
    task = TaskService.update_status(
        db, community_id, task_id, form.status.data, actor_uid=g.user["uid"]
    )
    return jsonify({"message": "Task updated.", "task": task})


@bp.route("/community/<string:community_id>/<string:task_id>/delete", methods=["POST"])
@login_required(lead_required=True)
def delete_task(community_id, task_id):
    """Delete a task."""
    db = firestore.client()
    TaskService.delete_task(db, community_id, task_id, actor_uid=g.user["uid"])
    return jsonify({"message": "Task deleted."})
