# socialhub/test_routes.py
"""
HTTP 응답 형식({"success", "message", ...})과 상태 코드 테스트
"""
import io


def _create_post(client, headers, **form):
    return client.post('/api/posts', data=form, headers=headers, content_type='multipart/form-data')


def test_create_text_post(client, auth_headers, alice):
    res = _create_post(client, auth_headers(alice), type='text', title='hello', tags='a, b ,c')

    assert res.status_code == 201
    body = res.get_json()
    assert body['success'] is True
    assert body['message']
    assert body['post']['user_id'] == alice.user_id
    assert body['post']['media_url'] is None
    assert body['post']['tags'] == ['a', 'b', 'c']
    assert body['post']['like_count'] == 0

def test_create_post_requires_token(client):
    res = _create_post(client, {}, type='text')
    assert res.status_code == 401
    assert res.get_json()['success'] is False

def test_create_post_missing_type(client, auth_headers, alice):
    res = _create_post(client, auth_headers(alice), title='no type')
    assert res.status_code == 400
    body = res.get_json()
    assert body['success'] is False
    assert body['error_code'] == 'VALIDATION_ERROR'
    assert 'type' in body['details']

def test_create_image_post_without_media(client, auth_headers, store, alice):
    res = _create_post(client, auth_headers(alice), type='image')
    assert res.status_code == 400
    assert res.get_json()['error_code'] == 'VALIDATION_ERROR'
    assert store.data.get('posts', {}) == {}

def test_create_video_post(client, auth_headers, media, alice):
    res = _create_post(client, auth_headers(alice), type='video', media=(io.BytesIO(b'\x00' * 2048), 'clip.mp4'))

    assert res.status_code == 201
    post = res.get_json()['post']
    assert post['media_url'] == 'https://cdn/x.mp4'
    assert 'x.jpg' in post['thumbnail_url']
    assert media.uploads[0]['size'] == 2048

def test_media_upload_failure(client, auth_headers, media, store, alice):
    media.fail = True
    res = _create_post(client, auth_headers(alice), type='image', media=(io.BytesIO(b'png'), 'a.png'))
    assert res.status_code == 502
    assert res.get_json()['success'] is False
    assert store.data.get('posts', {}) == {}

def test_like_and_dislike(client, auth_headers, text_post, bob):
    headers = auth_headers(bob)
    post_id = text_post['post_id']

    body = client.post(f'/api/posts/{post_id}/like', headers=headers).get_json()
    assert body['success'] is True
    assert (body['action'], body['like_count'], body['dislike_count']) == ('added', 1, 0)

    body = client.post(f'/api/posts/{post_id}/dislike', headers=headers).get_json()
    assert (body['action'], body['like_count'], body['dislike_count']) == ('added', 0, 1)
    assert body['post']['dislikes'] == [bob.user_id]

def test_like_missing_post(client, auth_headers, bob):
    res = client.post('/api/posts/missing/like', headers=auth_headers(bob))
    assert res.status_code == 404
    assert res.get_json()['success'] is False

def test_store_failure_is_server_error(client, auth_headers, store, text_post, bob):
    store.fail_on_update = 'posts'
    res = client.post(f"/api/posts/{text_post['post_id']}/like", headers=auth_headers(bob))
    assert res.status_code == 500
    body = res.get_json()
    assert body['success'] is False
    assert body['error'] == 'store unavailable'

def test_comment_lifecycle(client, auth_headers, store, text_post, alice, bob):
    post_id = text_post['post_id']
    res = client.post(f'/api/posts/{post_id}/comments', json={'content': 'hi'}, headers=auth_headers(bob))
    assert res.status_code == 201
    body = res.get_json()
    comment_id = body['comment']['comment_id']
    assert body['user']['username'] == 'bob'

    post = client.get(f'/api/posts/{post_id}').get_json()['post']
    assert [c['content'] for c in post['comments']] == ['hi']

    res = client.patch(f'/api/comments/{comment_id}', json={'content': 'mine now'}, headers=auth_headers(alice))
    assert res.status_code == 403
    assert res.get_json()['error_code'] == 'FORBIDDEN'
    assert store.get('comments', comment_id)['content'] == 'hi'

    res = client.patch(f'/api/comments/{comment_id}', json={'content': 'edited'}, headers=auth_headers(bob))
    assert res.status_code == 200
    assert res.get_json()['comment']['content'] == 'edited'

    res = client.delete(f'/api/comments/{comment_id}', headers=auth_headers(bob))
    assert res.status_code == 200
    assert client.get(f'/api/posts/{post_id}').get_json()['post']['comments'] == []

def test_comment_requires_content(client, auth_headers, text_post, bob):
    res = client.post(f"/api/posts/{text_post['post_id']}/comments", json={}, headers=auth_headers(bob))
    assert res.status_code == 400
    assert res.get_json()['success'] is False

def test_follow_and_unfollow(client, auth_headers, alice, bob):
    res = client.post('/api/users/follow', json={'user_id': bob.user_id}, headers=auth_headers(alice))
    assert res.status_code == 200
    body = res.get_json()
    assert body['user']['followers'] == [alice.user_id]
    assert body['current_user']['following'] == [bob.user_id]
    assert 'email' not in body['user']

    res = client.post('/api/users/unfollow', json={'user_id': bob.user_id}, headers=auth_headers(alice))
    assert res.get_json()['user']['followers'] == []

def test_self_follow(client, auth_headers, alice):
    res = client.post('/api/users/follow', json={'user_id': alice.user_id}, headers=auth_headers(alice))
    assert res.status_code == 400
    assert res.get_json()['error_code'] == 'VALIDATION_ERROR'

def test_follow_missing_user(client, auth_headers, alice):
    res = client.post('/api/users/follow', json={'user_id': 'nobody'}, headers=auth_headers(alice))
    assert res.status_code == 404

def test_save_and_unsave(client, auth_headers, text_post, bob):
    headers = auth_headers(bob)
    url = f"/api/users/me/saved-posts/{text_post['post_id']}"

    client.post(url, headers=headers)
    body = client.post(url, headers=headers).get_json()
    assert body['success'] is True
    assert [p['post_id'] for p in body['user']['saved_posts']] == [text_post['post_id']]

    body = client.get('/api/users/me/saved-posts', headers=headers).get_json()
    assert len(body['posts']) == 1

    client.delete(url, headers=headers)
    body = client.delete(url, headers=headers).get_json()
    assert body['success'] is True
    assert body['user']['saved_posts'] == []

def test_profile_routes(client, auth_headers, alice):
    body = client.get('/api/users/me', headers=auth_headers(alice)).get_json()
    assert body['user']['email'] == 'alice@example.com'
    assert 'password_hash' not in body['user']

    res = client.patch('/api/users/me', json={'bio': 'hi there'}, headers=auth_headers(alice))
    assert res.get_json()['user']['bio'] == 'hi there'

    body = client.get(f'/api/users/{alice.user_id}').get_json()
    assert body['user']['bio'] == 'hi there'
    assert 'email' not in body['user']

def test_feed_and_user_posts(client, text_post, alice):
    body = client.get('/api/posts?limit=5').get_json()
    assert [p['post_id'] for p in body['posts']] == [text_post['post_id']]
    assert body['next_cursor'] is None

    body = client.get(f'/api/users/{alice.user_id}/posts').get_json()
    assert len(body['posts']) == 1

def test_delete_post_route(client, auth_headers, text_post, alice, bob):
    url = f"/api/posts/{text_post['post_id']}"
    assert client.delete(url, headers=auth_headers(bob)).status_code == 403
    assert client.delete(url, headers=auth_headers(alice)).status_code == 200
    assert client.get(url).status_code == 404

def test_title_length_counts_trimmed_text(client, auth_headers, alice):
    title = 'a' * 150
    res = _create_post(client, auth_headers(alice), type='text', title=f'  {title}  ')
    assert res.status_code == 201
    assert res.get_json()['post']['title'] == title

    res = _create_post(client, auth_headers(alice), type='text', title='a' * 151)
    assert res.status_code == 400
    assert res.get_json()['error_code'] == 'VALIDATION_ERROR'

def test_any_user_can_delete_comment(client, auth_headers, store, text_post, alice, bob):
    post_id = text_post['post_id']
    comment_id = client.post(f'/api/posts/{post_id}/comments', json={'content': 'hi'},
                             headers=auth_headers(bob)).get_json()['comment']['comment_id']

    res = client.delete(f'/api/comments/{comment_id}', headers=auth_headers(alice))
    assert res.status_code == 200
    assert store.get('comments', comment_id) is None

def test_save_unknown_post(client, auth_headers, bob):
    res = client.post('/api/users/me/saved-posts/not-a-post', headers=auth_headers(bob))
    assert res.status_code == 200
    assert res.get_json()['user']['saved_posts'] == []

def test_update_email_taken(client, auth_headers, alice, bob):
    res = client.patch('/api/users/me', json={'email': 'alice@example.com'}, headers=auth_headers(bob))
    assert res.status_code == 400
    assert res.get_json()['error_code'] == 'VALIDATION_ERROR'
