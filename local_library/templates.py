# --------------------
# HTML Templates (inline, served through a DictLoader)
# --------------------
BASE_HTML = """
<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>{{ title }} | Local Library</title>
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <link href="https://cdn.jsdelivr.net/npm/bootstrap@5.3.0/dist/css/bootstrap.min.css" rel="stylesheet">
</head>
<body>
<div class="container-fluid">
  <div class="row">
    <div class="col-sm-2">
      <ul class="nav flex-column py-3">
        <li><a href="{{ url_for('catalog.index') }}">Home</a></li>
        <li><a href="{{ url_for('catalog.book_list') }}">All books</a></li>
        <li><a href="{{ url_for('catalog.author_list') }}">All authors</a></li>
        <li><a href="{{ url_for('catalog.genre_list') }}">All genres</a></li>
        <li><a href="{{ url_for('catalog.bookinstance_list') }}">All book-instances</a></li>
        <li><hr></li>
        <li><a href="{{ url_for('catalog.author_create') }}">Create new author</a></li>
        <li><a href="{{ url_for('catalog.genre_create') }}">Create new genre</a></li>
        <li><a href="{{ url_for('catalog.book_create') }}">Create new book</a></li>
        <li><a href="{{ url_for('catalog.bookinstance_create') }}">Create new book instance (copy)</a></li>
        <li><hr></li>
        {% if principal %}
          <li>Signed in as <a href="{{ principal.url }}">{{ principal.username }}</a> ({{ principal.role_name }})</li>
          <li><a href="{{ url_for('users.logout') }}">Logout</a></li>
        {% else %}
          <li><a href="{{ url_for('users.login') }}">Login</a></li>
          <li><a href="{{ url_for('users.register') }}">Register</a></li>
        {% endif %}
      </ul>
    </div>
    <main class="col-sm-10 py-3">
      {% with messages = get_flashed_messages(with_categories=true) %}
        {% for cat, msg in messages %}
          <div class="alert alert-{{ 'success' if cat == 'success' else 'danger' }}">{{ msg }}</div>
        {% endfor %}
      {% endwith %}
      {% block content %}{% endblock %}
    </main>
  </div>
</div>
</body>
</html>
"""

FAILURES_HTML = """
{% if failures %}
  <ul class="text-danger">
    {% for field, message in failures %}
      <li>{{ message }}</li>
    {% endfor %}
  </ul>
{% endif %}
"""

PAGINATION_HTML = """
{% if total_pages > 1 %}
  <nav><ul class="pagination">
    {% if page > 1 %}
      <li class="page-item"><a class="page-link" href="{{ url_for(request.endpoint, page=page-1) }}">Previous</a></li>
    {% endif %}
    {% if pages[0] > 1 %}
      <li class="page-item"><a class="page-link" href="{{ url_for(request.endpoint, page=1) }}">1</a></li>
      {% if pages[0] > 2 %}<li class="page-item disabled"><span class="page-link">...</span></li>{% endif %}
    {% endif %}
    {% for p in pages %}
      <li class="page-item {% if p == page %}active{% endif %}"><a class="page-link" href="{{ url_for(request.endpoint, page=p) }}">{{ p }}</a></li>
    {% endfor %}
    {% if pages[-1] < total_pages %}
      {% if pages[-1] < total_pages - 1 %}<li class="page-item disabled"><span class="page-link">...</span></li>{% endif %}
      <li class="page-item"><a class="page-link" href="{{ url_for(request.endpoint, page=total_pages) }}">{{ total_pages }}</a></li>
    {% endif %}
    {% if page < total_pages %}
      <li class="page-item"><a class="page-link" href="{{ url_for(request.endpoint, page=page+1) }}">Next</a></li>
    {% endif %}
  </ul></nav>
{% endif %}
"""

INDEX_HTML = """
{% extends "base.html" %}
{% block content %}
  <h1>Local Library Home</h1>
  <p>Welcome to <em>LocalLibrary</em>, a very basic Flask website.</p>
  <h2>Dynamic content</h2>
  <p>The library has the following record counts:</p>
  <ul>
    <li><strong>Books:</strong> {{ counts.books }}</li>
    <li><strong>Copies:</strong> {{ counts.copies }}</li>
    <li><strong>Copies available:</strong> {{ counts.copies_available }}</li>
    <li><strong>Authors:</strong> {{ counts.authors }}</li>
    <li><strong>Genres:</strong> {{ counts.genres }}</li>
  </ul>
{% endblock %}
"""

ERROR_HTML = """
{% extends "base.html" %}
{% block content %}
  <h1>{{ status }} {{ name }}</h1>
  <p>{{ message }}</p>
  {% if detail %}<pre>{{ detail }}</pre>{% endif %}
{% endblock %}
"""

# ----- Authors -----
AUTHOR_LIST_HTML = """
{% extends "base.html" %}
{% block content %}
  <h1>{{ title }}</h1>
  <ul>
    {% for author in items %}
      <li><a href="{{ author.url }}">{{ author.name }}</a> ({{ author.lifespan }})</li>
    {% else %}
      <li>There are no authors.</li>
    {% endfor %}
  </ul>
  {% include "_pagination.html" %}
{% endblock %}
"""

AUTHOR_DETAIL_HTML = """
{% extends "base.html" %}
{% block content %}
  <h1>Author: {{ author.name }}</h1>
  <p>{{ author.lifespan }}</p>
  <h4>Books</h4>
  <dl>
    {% for book in author_books %}
      <dt><a href="{{ book.url }}">{{ book.title }}</a></dt>
      <dd>{{ book.summary|safe }}</dd>
    {% else %}
      <p>This author has no books.</p>
    {% endfor %}
  </dl>
  <p>
    <a href="{{ url_for('catalog.author_update', author_id=author.id) }}">Update author</a> |
    <a href="{{ url_for('catalog.author_delete', author_id=author.id) }}">Delete author</a>
  </p>
{% endblock %}
"""

AUTHOR_FORM_HTML = """
{% extends "base.html" %}
{% block content %}
  <h1>{{ title }}</h1>
  <form method="post">
    {{ form.csrf_token }}
    <div class="mb-3">
      <label class="form-label" for="first_name">First Name:</label>
      <input class="form-control" id="first_name" name="first_name" value="{{ form.first_name.data or '' }}" maxlength="100">
      <label class="form-label" for="family_name">Family Name:</label>
      <input class="form-control" id="family_name" name="family_name" value="{{ form.family_name.data or '' }}" maxlength="100">
    </div>
    <div class="mb-3">
      <label class="form-label" for="date_of_birth">Date of birth:</label>
      <input class="form-control" type="date" id="date_of_birth" name="date_of_birth" value="{{ form.date_of_birth.data or '' }}">
      <label class="form-label" for="date_of_death">Date of death:</label>
      <input class="form-control" type="date" id="date_of_death" name="date_of_death" value="{{ form.date_of_death.data or '' }}">
    </div>
    <button class="btn btn-primary" type="submit">Submit</button>
  </form>
  {% include "_failures.html" %}
{% endblock %}
"""

AUTHOR_DELETE_HTML = """
{% extends "base.html" %}
{% block content %}
  <h1>{{ title }}: {{ author.name }}</h1>
  <p>{{ author.lifespan }}</p>
  {% if author_books %}
    <p><strong>Delete the following books before attempting to delete this author.</strong></p>
    <dl>
      {% for book in author_books %}
        <dt><a href="{{ book.url }}">{{ book.title }}</a></dt>
        <dd>{{ book.summary|safe }}</dd>
      {% endfor %}
    </dl>
  {% else %}
    <p>Do you really want to delete this Author?</p>
    <form method="post">
      <input type="hidden" name="csrf_token" value="{{ csrf_token() }}">
      <button class="btn btn-danger" type="submit">Delete</button>
    </form>
  {% endif %}
{% endblock %}
"""

# ----- Genres -----
GENRE_LIST_HTML = """
{% extends "base.html" %}
{% block content %}
  <h1>{{ title }}</h1>
  <ul>
    {% for genre in items %}
      <li><a href="{{ genre.url }}">{{ genre.name }}</a></li>
    {% else %}
      <li>There are no genres.</li>
    {% endfor %}
  </ul>
  {% include "_pagination.html" %}
{% endblock %}
"""

GENRE_DETAIL_HTML = """
{% extends "base.html" %}
{% block content %}
  <h1>Genre: {{ genre.name }}</h1>
  <h4>Books</h4>
  <dl>
    {% for book in genre_books %}
      <dt><a href="{{ book.url }}">{{ book.title }}</a></dt>
      <dd>{{ book.summary|safe }}</dd>
    {% else %}
      <p>This genre has no books.</p>
    {% endfor %}
  </dl>
  <p>
    <a href="{{ url_for('catalog.genre_update', genre_id=genre.id) }}">Update genre</a> |
    <a href="{{ url_for('catalog.genre_delete', genre_id=genre.id) }}">Delete genre</a>
  </p>
{% endblock %}
"""

GENRE_FORM_HTML = """
{% extends "base.html" %}
{% block content %}
  <h1>{{ title }}</h1>
  <form method="post">
    {{ form.csrf_token }}
    <div class="mb-3">
      <label class="form-label" for="name">Genre:</label>
      <input class="form-control" id="name" name="name" placeholder="Fantasy, Poetry etc." value="{{ form.name.data or '' }}" maxlength="100">
    </div>
    <button class="btn btn-primary" type="submit">Submit</button>
  </form>
  {% include "_failures.html" %}
{% endblock %}
"""

GENRE_DELETE_HTML = """
{% extends "base.html" %}
{% block content %}
  <h1>{{ title }}: {{ genre.name }}</h1>
  {% if genre_books %}
    <p><strong>Delete the following books before attempting to delete this genre.</strong></p>
    <dl>
      {% for book in genre_books %}
        <dt><a href="{{ book.url }}">{{ book.title }}</a></dt>
        <dd>{{ book.summary|safe }}</dd>
      {% endfor %}
    </dl>
  {% else %}
    <p>Do you really want to delete this Genre?</p>
    <form method="post">
      <input type="hidden" name="csrf_token" value="{{ csrf_token() }}">
      <button class="btn btn-danger" type="submit">Delete</button>
    </form>
  {% endif %}
{% endblock %}
"""

# ----- Books -----
BOOK_LIST_HTML = """
{% extends "base.html" %}
{% block content %}
  <h1>{{ title }}</h1>
  <ul>
    {% for book in items %}
      <li><a href="{{ book.url }}">{{ book.title }}</a> ({{ book.author.name }})</li>
    {% else %}
      <li>There are no books.</li>
    {% endfor %}
  </ul>
  {% include "_pagination.html" %}
{% endblock %}
"""

BOOK_DETAIL_HTML = """
{% extends "base.html" %}
{% block content %}
  <h1>Title: {{ book.title }}</h1>
  <p><strong>Author:</strong> <a href="{{ book.author.url }}">{{ book.author.name }}</a></p>
  <p><strong>Summary:</strong> {{ book.summary|safe }}</p>
  <p><strong>ISBN:</strong> {{ book.isbn }}</p>
  <p><strong>Genre:</strong>
    {% for genre in book.genres %}<a href="{{ genre.url }}">{{ genre.name }}</a>{% if not loop.last %}, {% endif %}{% endfor %}
  </p>
  <h4>Copies</h4>
  {% for copy in book_instances %}
    <hr>
    <p class="{{ 'text-success' if copy.status == 'Available' else ('text-danger' if copy.status == 'Maintenance' else 'text-warning') }}">{{ copy.status }}</p>
    {% if copy.status != 'Available' %}<p><strong>Due back:</strong> {{ copy.due_back_formatted }}</p>{% endif %}
    <p><strong>Imprint:</strong> {{ copy.imprint }}</p>
    <p><strong>Id:</strong> <a href="{{ copy.url }}">{{ copy.id }}</a></p>
  {% else %}
    <p>There are no copies of this book in the library.</p>
  {% endfor %}
  <p>
    <a href="{{ url_for('catalog.book_update', book_id=book.id) }}">Update book</a> |
    <a href="{{ url_for('catalog.book_delete', book_id=book.id) }}">Delete book</a>
  </p>
{% endblock %}
"""

BOOK_FORM_HTML = """
{% extends "base.html" %}
{% block content %}
  <h1>{{ title }}</h1>
  <form method="post">
    {{ form.csrf_token }}
    <div class="mb-3">
      <label class="form-label" for="title">Title:</label>
      <input class="form-control" id="title" name="title" placeholder="Name of book" value="{{ form.title.data or '' }}">
    </div>
    <div class="mb-3">
      <label class="form-label" for="author">Author:</label>
      <select class="form-select" id="author" name="author">
        <option value="">--Please select an author--</option>
        {% for author in authors %}
          <option value="{{ author.id }}" {% if form.author.data == author.id|string %}selected{% endif %}>{{ author.name }}</option>
        {% endfor %}
      </select>
    </div>
    <div class="mb-3">
      <label class="form-label" for="summary">Summary:</label>
      <textarea class="form-control" id="summary" name="summary" placeholder="Summary">{{ form.summary.data or '' }}</textarea>
    </div>
    <div class="mb-3">
      <label class="form-label" for="isbn">ISBN:</label>
      <input class="form-control" id="isbn" name="isbn" placeholder="ISBN13" value="{{ form.isbn.data or '' }}">
    </div>
    <div class="mb-3">
      <label class="form-label">Genre:</label>
      {% for genre in genres %}
        <div class="form-check form-check-inline">
          <input class="form-check-input" type="checkbox" name="genre" id="genre-{{ genre.id }}" value="{{ genre.id }}" {% if form.genre.data and genre.id in form.genre.data %}checked{% endif %}>
          <label class="form-check-label" for="genre-{{ genre.id }}">{{ genre.name }}</label>
        </div>
      {% endfor %}
    </div>
    <button class="btn btn-primary" type="submit">Submit</button>
  </form>
  {% include "_failures.html" %}
{% endblock %}
"""

BOOK_DELETE_HTML = """
{% extends "base.html" %}
{% block content %}
  <h1>{{ title }}: {{ book.title }}</h1>
  <p><strong>Author:</strong> {{ book.author.name }}</p>
  {% if book_instances %}
    <p><strong>Delete the following copies before attempting to delete this book.</strong></p>
    {% for copy in book_instances %}
      <hr>
      <p>{{ copy.status }}</p>
      <p><strong>Imprint:</strong> {{ copy.imprint }}</p>
      <p><strong>Id:</strong> <a href="{{ copy.url }}">{{ copy.id }}</a></p>
    {% endfor %}
  {% else %}
    <p>Do you really want to delete this Book?</p>
    <form method="post">
      <input type="hidden" name="csrf_token" value="{{ csrf_token() }}">
      <button class="btn btn-danger" type="submit">Delete</button>
    </form>
  {% endif %}
{% endblock %}
"""

# ----- Book instances -----
BOOKINSTANCE_LIST_HTML = """
{% extends "base.html" %}
{% block content %}
  <h1>{{ title }}</h1>
  <ul>
    {% for copy in items %}
      <li>
        <a href="{{ copy.url }}">{{ copy.book.title }} : {{ copy.imprint }}</a> - {{ copy.status }}
        {% if copy.status != 'Available' %}(Due: {{ copy.due_back_formatted }}){% endif %}
      </li>
    {% else %}
      <li>There are no book copies in this library.</li>
    {% endfor %}
  </ul>
  {% include "_pagination.html" %}
{% endblock %}
"""

BOOKINSTANCE_DETAIL_HTML = """
{% extends "base.html" %}
{% block content %}
  <h1>ID: {{ bookinstance.id }}</h1>
  <p><strong>Title:</strong> <a href="{{ bookinstance.book.url }}">{{ bookinstance.book.title }}</a></p>
  <p><strong>Imprint:</strong> {{ bookinstance.imprint }}</p>
  <p><strong>Status:</strong> {{ bookinstance.status }}</p>
  {% if bookinstance.status != 'Available' %}<p><strong>Due back:</strong> {{ bookinstance.due_back_formatted }}</p>{% endif %}
  <p>
    <a href="{{ url_for('catalog.bookinstance_update', bookinstance_id=bookinstance.id) }}">Update BookInstance</a> |
    <a href="{{ url_for('catalog.bookinstance_delete', bookinstance_id=bookinstance.id) }}">Delete BookInstance</a>
  </p>
{% endblock %}
"""

BOOKINSTANCE_FORM_HTML = """
{% extends "base.html" %}
{% block content %}
  <h1>{{ title }}</h1>
  <form method="post">
    {{ form.csrf_token }}
    <div class="mb-3">
      <label class="form-label" for="book">Book:</label>
      <select class="form-select" id="book" name="book">
        <option value="">--Please select a book--</option>
        {% for book in books %}
          <option value="{{ book.id }}" {% if form.book.data == book.id|string %}selected{% endif %}>{{ book.title }}</option>
        {% endfor %}
      </select>
    </div>
    <div class="mb-3">
      <label class="form-label" for="imprint">Imprint:</label>
      <input class="form-control" id="imprint" name="imprint" placeholder="Publisher and date information" value="{{ form.imprint.data or '' }}">
    </div>
    <div class="mb-3">
      <label class="form-label" for="due_back">Date when book available:</label>
      <input class="form-control" type="date" id="due_back" name="due_back" value="{{ form.due_back.data or '' }}">
    </div>
    <div class="mb-3">
      <label class="form-label" for="status">Status:</label>
      <select class="form-select" id="status" name="status">
        {% for value, label in form.status.choices %}
          <option value="{{ value }}" {% if form.status.data == value %}selected{% endif %}>{{ label }}</option>
        {% endfor %}
      </select>
    </div>
    <button class="btn btn-primary" type="submit">Submit</button>
  </form>
  {% include "_failures.html" %}
{% endblock %}
"""

BOOKINSTANCE_DELETE_HTML = """
{% extends "base.html" %}
{% block content %}
  <h1>{{ title }}</h1>
  <p>Do you really want to delete this BookInstance?</p>
  <p><strong>ID:</strong> {{ bookinstance.id }}</p>
  <p><strong>Title:</strong> <a href="{{ bookinstance.book.url }}">{{ bookinstance.book.title }}</a></p>
  <p><strong>Imprint:</strong> {{ bookinstance.imprint }}</p>
  <p><strong>Status:</strong> {{ bookinstance.status }}</p>
  <form method="post">
    <input type="hidden" name="csrf_token" value="{{ csrf_token() }}">
    <button class="btn btn-danger" type="submit">Delete</button>
  </form>
{% endblock %}
"""

# ----- Users -----
USER_LOGIN_HTML = """
{% extends "base.html" %}
{% block content %}
  <h1>{{ title }}</h1>
  <form method="post" action="{{ url_for('users.login') }}">
    {{ form.csrf_token }}
    <div class="mb-3">
      <label class="form-label" for="username">Username:</label>
      <input class="form-control" id="username" name="username" value="{{ form.username.data or '' }}">
    </div>
    <div class="mb-3">
      <label class="form-label" for="password">Password:</label>
      <input class="form-control" type="password" id="password" name="password">
    </div>
    <button class="btn btn-primary" type="submit">Login</button>
  </form>
  <p><a href="{{ url_for('users.reset') }}">Forgot your password?</a></p>
{% endblock %}
"""

USER_FORM_HTML = """
{% extends "base.html" %}
{% block content %}
  <h1>{{ title }}</h1>
  <form method="post">
    {{ form.csrf_token }}
    <div class="mb-3">
      <label class="form-label" for="username">Username:</label>
      <input class="form-control" id="username" name="username" value="{{ form.username.data or '' }}">
    </div>
    <div class="mb-3">
      <label class="form-label" for="fullname">Full name:</label>
      <input class="form-control" id="fullname" name="fullname" value="{{ form.fullname.data or '' }}">
    </div>
    <div class="mb-3">
      <label class="form-label" for="email">Email:</label>
      <input class="form-control" type="email" id="email" name="email" value="{{ form.email.data or '' }}">
    </div>
    {% if not is_update_form %}
      <div class="mb-3">
        <label class="form-label" for="role">Role:</label>
        <select class="form-select" id="role" name="role">
          <option value="">--Please select a role--</option>
          {% for value, label in form.role.choices %}
            <option value="{{ value }}" {% if form.role.data == value %}selected{% endif %}>{{ label }}</option>
          {% endfor %}
        </select>
      </div>
    {% endif %}
    <div class="mb-3">
      <label class="form-label" for="password">Password:</label>
      <input class="form-control" type="password" id="password" name="password">
      <label class="form-label" for="password_confirm">Confirm password:</label>
      <input class="form-control" type="password" id="password_confirm" name="password_confirm">
      {% if is_update_form %}<div class="form-text">Leave both empty to keep your current password.</div>{% endif %}
    </div>
    <button class="btn btn-primary" type="submit">Submit</button>
  </form>
  {% include "_failures.html" %}
{% endblock %}
"""

USER_PROFILE_HTML = """
{% extends "base.html" %}
{% block content %}
  <h1>{{ title }}</h1>
  <p><strong>Username:</strong> {{ profile.username }}</p>
  <p><strong>Full name:</strong> {{ profile.fullname }}</p>
  <p><strong>Email:</strong> {{ profile.email }}</p>
  <p><strong>Role:</strong> {{ profile.role_name }}</p>
  <p><a href="{{ url_for('users.update', user_id=profile.id) }}">Update profile</a></p>
{% endblock %}
"""

USER_RESET_HTML = """
{% extends "base.html" %}
{% block content %}
  <h1>{{ title }}</h1>
  {% if is_second_step %}
    <p>Choose a new password for <strong>{{ profile.username }}</strong>.</p>
    <form method="post" action="{{ url_for('users.reset_final') }}">
      {{ form.csrf_token }}
      <input type="hidden" name="userid" value="{{ form.userid.data }}">
      <input type="hidden" name="token" value="{{ form.token.data }}">
      <div class="mb-3">
        <label class="form-label" for="password">New password:</label>
        <input class="form-control" type="password" id="password" name="password">
        <label class="form-label" for="password_confirm">Confirm new password:</label>
        <input class="form-control" type="password" id="password_confirm" name="password_confirm">
      </div>
      <button class="btn btn-primary" type="submit">Change password</button>
    </form>
  {% else %}
    <form method="post" action="{{ url_for('users.reset') }}">
      {{ form.csrf_token }}
      <div class="mb-3">
        <label class="form-label" for="username">Username:</label>
        <input class="form-control" id="username" name="username" value="{{ form.username.data or '' }}">
        <label class="form-label" for="email">Email:</label>
        <input class="form-control" type="email" id="email" name="email" value="{{ form.email.data or '' }}">
      </div>
      <button class="btn btn-primary" type="submit">Continue</button>
    </form>
  {% endif %}
  {% include "_failures.html" %}
{% endblock %}
"""

USER_WARNING_HTML = """
{% extends "base.html" %}
{% block content %}
  <h1>{{ title }}</h1>
  <p>Your account does not have permission for that page. Ask an administrator for a different role.</p>
{% endblock %}
"""

TEMPLATES = {
    "base.html": BASE_HTML,
    "_failures.html": FAILURES_HTML,
    "_pagination.html": PAGINATION_HTML,
    "index.html": INDEX_HTML,
    "error.html": ERROR_HTML,
    "author_list.html": AUTHOR_LIST_HTML,
    "author_detail.html": AUTHOR_DETAIL_HTML,
    "author_form.html": AUTHOR_FORM_HTML,
    "author_delete.html": AUTHOR_DELETE_HTML,
    "genre_list.html": GENRE_LIST_HTML,
    "genre_detail.html": GENRE_DETAIL_HTML,
    "genre_form.html": GENRE_FORM_HTML,
    "genre_delete.html": GENRE_DELETE_HTML,
    "book_list.html": BOOK_LIST_HTML,
    "book_detail.html": BOOK_DETAIL_HTML,
    "book_form.html": BOOK_FORM_HTML,
    "book_delete.html": BOOK_DELETE_HTML,
    "bookinstance_list.html": BOOKINSTANCE_LIST_HTML,
    "bookinstance_detail.html": BOOKINSTANCE_DETAIL_HTML,
    "bookinstance_form.html": BOOKINSTANCE_FORM_HTML,
    "bookinstance_delete.html": BOOKINSTANCE_DELETE_HTML,
    "user_login.html": USER_LOGIN_HTML,
    "user_form.html": USER_FORM_HTML,
    "user_profile.html": USER_PROFILE_HTML,
    "user_reset.html": USER_RESET_HTML,
    "user_warning.html": USER_WARNING_HTML,
}
